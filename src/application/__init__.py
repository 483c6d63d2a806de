"""Application layer - Use cases and orchestration.

Structure:
- commands/: Command dataclasses and handlers (write operations run as sagas)
- saga/: Saga orchestrator with reverse-order compensation
- services/: Effective permission aggregation and the permission gate
- event_handlers/: Reactions to domain events (cache invalidation)

The application layer orchestrates domain logic and imports only from the
domain and core layers.
"""
