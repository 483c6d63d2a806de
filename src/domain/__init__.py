"""Domain layer - Pure business logic.

This layer contains the authorization model, entities, protocols (ports)
and domain events. The domain layer has NO dependencies on any framework or
infrastructure, apart from pydantic annotations in ``types``.

Structure:
- authorization_model.py: relations, implications and parent links per object type
- entities/: tuples, roles, GPG keys, effective permissions, decisions
- enums/: relations, object/subject types, capabilities, audit actions
- protocols/: ports implemented by infrastructure adapters
- events/: things that happened (grants, role assignments, saga progress)
- validators/: parsing of relation/type/id input into domain values

The domain layer defines WHAT the access model is, not HOW it's stored.
"""
