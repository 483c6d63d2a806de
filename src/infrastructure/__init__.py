"""Infrastructure layer - Adapters and external integrations.

This layer contains implementations of domain protocols (ports):
- authorization/: tuple and team membership stores, ReBAC checker
- persistence/: SQLAlchemy models, database session, role and GPG key repositories
- cache/: effective permission cache (Redis or in-process)
- audit/: audit trail adapters
- events/: in-memory event bus and logging handler
- webhooks/: best-effort outbound notifications over httpx
- logging/: structlog console adapter

The infrastructure layer depends on the domain layer (implements protocols)
but the domain layer does NOT depend on infrastructure.
"""
