"""Infrastructure layer — persistence adapters for the register snapshot.

This layer depends on stdlib, structlog and SQLAlchemy.  It imports the
domain snapshot model and errors, never services, commands, or output.
"""
