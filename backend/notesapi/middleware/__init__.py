# Middleware package init
"""
Notes API Backend - Middleware Package
======================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: generate or accept the correlation ID
    2. Logging: access log line carrying that ID
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses pass back through the chain in reverse, so the ID header is
    added last and the logged duration covers everything inside.
"""
