# Routes package init
"""
Notes API Backend - API Routes Package
======================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   POST/GET        /api/v1/notes
                  GET/PUT/DELETE  /api/v1/notes/{id}
    - health.py:  GET             /health
    - docs.py:    GET             /rapidoc

Routes stay thin: decode the request, call the service, pick the status
code. Everything else lives in services and repositories.
"""
