"""
Agentic Notes.

- core/: Configuration, logging, exceptions, database handle
- models/: SQLAlchemy models
- schemas/: Pydantic schemas exchanged with the UI layer
- repositories/: Data access
- services/: Note store, query engine, selection and lifecycle logic
- events/: Reactive channels and the in-process event bus
- viewmodels/: Operation surface driven by the UI
- migrations/: Alembic schema revisions
"""

__version__ = "0.2.0"
