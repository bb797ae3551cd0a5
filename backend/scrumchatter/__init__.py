"""
Scrum Chatter Backend: Application Package
===========================================

What: Team members, meeting durations, and validate-as-you-type input dialogs.
Who:  Imported by uvicorn (scrumchatter.main:app), Alembic, and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Dialogs (Input Dialog Sessions)   │  ← Validation state per session
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Member store, background work
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Dialog sessions never touch the database directly: they hand their
    validator a DialogContext and let it open its own session.
"""

__version__ = "1.0.0"
