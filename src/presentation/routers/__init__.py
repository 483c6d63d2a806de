"""HTTP routers.

Versioned resources live under ``api/v1``; route-level permission checks
and identity extraction under ``api/middleware``.
"""
