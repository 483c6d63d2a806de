"""Effective permission aggregation.

Computes the capability snapshot of a (user, org) pair: the OR of the
user's assigned role flags and any tuple grant of the equivalent org
relation, team-indirect grants included. A stronger relation satisfies a
weaker capability (admin => can_manage_users), and the computed
capabilities (can_manage_api_keys, can_manage_webhooks) are the AND of their
components after the OR.

Snapshots are always computed from scratch. The cache only ever holds whole
snapshots; any role or tuple mutation affecting the pair deletes the cached
one and the next read recomputes. A snapshot whose computation overlapped
an invalidation is returned but not cached.

Usage:
    service = EffectivePermissionsService(
        authorization=authz, roles=role_repo, cache=cache, logger=logger
    )
    result = await service.get("u1", "o1")
"""

from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.authorization_model import (
    CAPABILITY_RELATIONS,
    intersection_components,
    satisfying_relations,
)
from src.domain.entities import EffectivePermissions
from src.domain.enums import Capability, ObjectType, Relation
from src.domain.protocols import (
    AuthorizationProtocol,
    LoggerProtocol,
    PermissionCacheProtocol,
    RoleRepository,
)
from src.domain.validators import parse_identifier


class EffectivePermissionsService:
    """Aggregates role flags and tuple grants into EffectivePermissions.

    Attributes:
        _authorization: Checker used for the tuple side.
        _roles: Role assignments and flags.
        _cache: Snapshot cache (fail-open).
        _logger: Structured logger.
        _ttl_seconds: Cache TTL of a snapshot.
        _generation: Bumped by every invalidation in this process.
    """

    def __init__(
        self,
        *,
        authorization: AuthorizationProtocol,
        roles: RoleRepository,
        cache: PermissionCacheProtocol,
        logger: LoggerProtocol,
        ttl_seconds: int = 300,
    ) -> None:
        self._authorization = authorization
        self._roles = roles
        self._cache = cache
        self._logger = logger
        self._ttl_seconds = ttl_seconds
        self._generation = 0

    async def compute(
        self, user_id: str, org_id: str
    ) -> Result[EffectivePermissions, DomainError]:
        """Compute a fresh snapshot, bypassing the cache.

        Returns:
            Success(EffectivePermissions), Failure(ValidationError) for blank
            ids, Failure(UnavailableError) when a store failed.
        """
        for value, field in ((user_id, "user_id"), (org_id, "org_id")):
            if isinstance(parsed := parse_identifier(value, field=field), Failure):
                return parsed

        match await self._role_relations(user_id, org_id):
            case Failure() as failure:
                return failure
            case Success(value=role_relations):
                pass

        relations = sorted({r for r in CAPABILITY_RELATIONS.values()}, key=lambda r: r.value)
        match await self._authorization.batch_check(
            user_id, [(relation, ObjectType.ORG, org_id) for relation in relations]
        ):
            case Failure() as failure:
                return failure
            case Success(value=results):
                tuple_grants = {
                    relation for relation, allowed in zip(relations, results, strict=True)
                    if allowed
                }

        def granted(relation: Relation) -> bool:
            components = intersection_components(ObjectType.ORG, relation)
            if components is not None:
                return all(granted(component) for component in components)
            if relation in tuple_grants:
                return True
            return bool(role_relations & satisfying_relations(ObjectType.ORG, relation))

        snapshot = EffectivePermissions(
            user_id=user_id,
            org_id=org_id,
            capabilities={
                capability: granted(relation)
                for capability, relation in CAPABILITY_RELATIONS.items()
            },
        )
        self._logger.debug(
            "effective_permissions_computed",
            user_id=user_id,
            org_id=org_id,
            granted=sorted(c.value for c in Capability if snapshot.allows(c)),
        )
        return Success(value=snapshot)

    async def get(
        self, user_id: str, org_id: str
    ) -> Result[EffectivePermissions, DomainError]:
        """Cached snapshot, recomputed on a miss or a cache failure."""
        match await self._cache.get(user_id, org_id):
            case Success(value=EffectivePermissions() as cached):
                return Success(value=cached)
            case Failure(error=error):
                self._logger.warning(
                    "permission_cache_read_failed",
                    user_id=user_id,
                    org_id=org_id,
                    error_code=error.code.value,
                )

        generation = self._generation
        result = await self.compute(user_id, org_id)
        if isinstance(result, Success) and generation != self._generation:
            self._logger.debug(
                "permission_snapshot_not_cached",
                user_id=user_id,
                org_id=org_id,
                reason="invalidated_during_compute",
            )
        elif isinstance(result, Success):
            stored = await self._cache.set(result.value, self._ttl_seconds)
            if isinstance(stored, Failure):
                self._logger.warning(
                    "permission_cache_write_failed",
                    user_id=user_id,
                    org_id=org_id,
                    error_code=stored.error.code.value,
                )
        return result

    async def invalidate(self, user_id: str, org_id: str) -> None:
        """Drop the cached snapshot of one (user, org) pair."""
        self._generation += 1
        result = await self._cache.invalidate(user_id, org_id)
        if isinstance(result, Failure):
            self._logger.warning(
                "permission_cache_invalidate_failed",
                user_id=user_id,
                org_id=org_id,
                error_code=result.error.code.value,
            )

    async def invalidate_org(self, org_id: str) -> None:
        """Drop every cached snapshot of an org."""
        self._generation += 1
        result = await self._cache.invalidate_org(org_id)
        if isinstance(result, Failure):
            self._logger.warning(
                "permission_cache_invalidate_failed",
                org_id=org_id,
                error_code=result.error.code.value,
            )

    async def _role_relations(
        self, user_id: str, org_id: str
    ) -> Result[frozenset[Relation], DomainError]:
        """Org relations granted by the user's assigned role (empty if none)."""
        match await self._roles.get_assignment(user_id, org_id):
            case Failure() as failure:
                return failure
            case Success(value=None):
                return Success(value=frozenset())
            case Success(value=assignment):
                pass

        match await self._roles.get(assignment.role_id):
            case Failure() as failure:
                return failure
            case Success(value=None):
                self._logger.warning(
                    "assigned_role_missing",
                    user_id=user_id,
                    org_id=org_id,
                    role_id=str(assignment.role_id),
                )
                return Success(value=frozenset())
            case Success(value=role):
                return Success(value=frozenset(role.granted_relations()))
