# Repositories package init
"""
Notes API Backend - Persistence Layer
=====================================

What:  Translates entity operations into reads and writes on stored rows.
How:   Each repository wraps one AsyncSession, injected per request.
       SQLAlchemy failures are wrapped in StorageError, missing rows in
       RecordNotFoundError; callers never see driver exceptions.

Repository Inventory:
    - NoteRepository: insert / get / update / delete / list over `notes`
"""
