# Services package init
"""
Notes API Backend - Services Layer
==================================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services receive their repository through FastAPI's dependency
       injection, apply the note rules and raise domain errors.

Service Inventory:
    - NoteService: validation and error translation for note CRUD
"""
