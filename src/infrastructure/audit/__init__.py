"""Audit trail adapters."""

from src.infrastructure.audit.in_memory_adapter import InMemoryAuditAdapter
from src.infrastructure.audit.postgres_adapter import PostgresAuditAdapter

__all__ = ["InMemoryAuditAdapter", "PostgresAuditAdapter"]
