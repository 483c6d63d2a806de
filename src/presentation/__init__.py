"""Presentation layer - API endpoints and HTTP concerns.

This layer contains FastAPI routers and endpoint definitions. The presentation
layer is thin - it runs permission checks, dispatches commands to the
application layer and translates results to HTTP responses.

Structure:
- routers/api/v1/: API version 1 endpoints (RESTful resources)
- routers/api/middleware/: identity, permission gate and trace dependencies

The presentation layer depends on the application layer but contains NO
authorization logic of its own.
"""
