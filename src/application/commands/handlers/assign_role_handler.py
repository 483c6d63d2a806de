"""Role handlers: assignment with tuple resync, default role creation.

Assign flow:
1. Load the role (must belong to the org)
2. Read the user's current org tuples
3. Saga step ``assignment_upsert`` (compensate: restore previous assignment)
4. Saga step ``tuple_remove``: role tuples the new role does not grant
   (compensate: re-grant)
5. Saga step ``tuple_write``: member + one tuple per true flag
   (compensate: revoke what was written)
6. Saga step ``audit``: ROLE_ASSIGNED
7. Publish RoleAssigned (effective permission cache invalidation)

Only role-managed org relations (member and the flag relations) are
resynced; direct capability grants on the org are left alone.
"""

from dataclasses import dataclass, field

from src.application.commands.authorization_commands import AssignRole, CreateDefaultRoles
from src.application.commands.handlers.saga_steps import (
    AuditEntry,
    TupleSagaContext,
    audit_step,
    remove_tuples_step,
    write_tuples_step,
)
from src.application.saga import SagaOrchestrator, SagaStep
from src.core.enums import ErrorCode
from src.core.errors import DomainError, NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.authorization_model import ROLE_FLAG_RELATIONS
from src.domain.entities import (
    ObjectRef,
    RelationTuple,
    Role,
    RoleAssignment,
    SubjectRef,
    default_roles,
)
from src.domain.enums import AuditAction, ObjectType, Relation, SubjectType
from src.domain.events import RoleAssigned
from src.domain.protocols import (
    AuditProtocol,
    AuthorizationProtocol,
    EventBusProtocol,
    LoggerProtocol,
    RoleRepository,
    TupleStoreProtocol,
)

ROLE_MANAGED_RELATIONS = frozenset((Relation.MEMBER, *ROLE_FLAG_RELATIONS))


@dataclass(slots=True, kw_only=True)
class RoleAssignmentContext(TupleSagaContext):
    assignment: RoleAssignment
    stale: list[RelationTuple]
    missing: list[RelationTuple]
    previous: RoleAssignment | None = None


class AssignRoleHandler:
    """Handler for AssignRole."""

    def __init__(
        self,
        roles: RoleRepository,
        tuples: TupleStoreProtocol,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._roles = roles
        self._tuples = tuples
        self._authorization = authorization
        self._audit = audit
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: AssignRole) -> Result[RoleAssignment, DomainError]:
        """Handle assign role command.

        Returns:
            Success(RoleAssignment), Failure(NotFoundError) for an unknown
            role or a role of another org, Failure(SagaStepFailure) when a
            step failed (everything before it rolled back).
        """
        match await self._roles.get(cmd.role_id):
            case Failure() as failure:
                return failure
            case Success(value=Role() as role) if role.org_id == cmd.org_id:
                pass
            case Success():
                return Failure(
                    error=NotFoundError(
                        code=ErrorCode.ROLE_NOT_FOUND,
                        message=f"Role {cmd.role_id} not found in org {cmd.org_id}",
                        resource_type="role",
                        resource_id=str(cmd.role_id),
                    )
                )

        user = SubjectRef(subject_type=SubjectType.USER, subject_id=cmd.user_id)
        org = ObjectRef(object_type=ObjectType.ORG, object_id=cmd.org_id)
        match await self._tuples.read_tuples(subject=user, obj=org):
            case Failure() as failure:
                return failure
            case Success(value=current):
                pass

        granted = role.granted_relations()
        current_relations = {t.relation for t in current}
        context = RoleAssignmentContext(
            assignment=RoleAssignment(
                user_id=cmd.user_id, org_id=cmd.org_id, role_id=role.id
            ),
            stale=[
                t
                for t in current
                if t.relation in ROLE_MANAGED_RELATIONS and t.relation not in granted
            ],
            missing=[
                RelationTuple.of(user, relation, org)
                for relation in granted
                if relation not in current_relations
            ],
        )

        steps = [
            self._assignment_step(),
            remove_tuples_step(
                "tuple_remove", self._authorization, lambda ctx: ctx.stale, self._logger
            ),
            write_tuples_step(
                "tuple_write", self._authorization, lambda ctx: ctx.missing, self._logger
            ),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.ROLE_ASSIGNED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Assigned role '{role.name}' to user {cmd.user_id}",
                    details={
                        "role_id": str(role.id),
                        "previous_role_id": (
                            str(ctx.previous.role_id) if ctx.previous else None
                        ),
                        "granted": [r.value for r in granted],
                        "removed": [t.relation.value for t in ctx.removed],
                    },
                ),
            ),
        ]

        match await self._orchestrator.execute("assign_role", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        await self._event_bus.publish(
            RoleAssigned(
                user_id=cmd.user_id,
                org_id=cmd.org_id,
                role_id=str(role.id),
                assigned_by=cmd.actor_id,
            )
        )
        return Success(value=context.assignment)

    def _assignment_step(self) -> SagaStep[RoleAssignmentContext]:
        async def forward(ctx: RoleAssignmentContext) -> Result[None, DomainError]:
            match await self._roles.assign(ctx.assignment):
                case Failure() as failure:
                    return failure
                case Success(value=previous):
                    ctx.previous = previous
                    return Success(value=None)

        async def compensate(ctx: RoleAssignmentContext) -> Result[object, DomainError]:
            if ctx.previous is not None:
                return await self._roles.assign(ctx.previous)
            return await self._roles.remove_assignment(
                ctx.assignment.user_id, ctx.assignment.org_id
            )

        return SagaStep("assignment_upsert", forward=forward, compensate=compensate)


@dataclass(slots=True, kw_only=True)
class DefaultRolesContext:
    roles: list[Role]
    created: list[Role] = field(default_factory=list)


class CreateDefaultRolesHandler:
    """Handler for CreateDefaultRoles: one saga step per role, then audit."""

    def __init__(
        self,
        roles: RoleRepository,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
    ) -> None:
        self._roles = roles
        self._audit = audit
        self._orchestrator = orchestrator

    async def handle(self, cmd: CreateDefaultRoles) -> Result[list[Role], DomainError]:
        context = DefaultRolesContext(roles=default_roles(cmd.org_id))
        steps: list[SagaStep[DefaultRolesContext]] = [
            self._create_step(role) for role in context.roles
        ]
        steps.append(
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.DEFAULT_ROLES_CREATED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Created {len(ctx.created)} default roles",
                    details={"roles": [role.name for role in ctx.created]},
                ),
            )
        )

        match await self._orchestrator.execute("create_default_roles", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                return Success(value=list(context.created))

    def _create_step(self, role: Role) -> SagaStep[DefaultRolesContext]:
        async def forward(ctx: DefaultRolesContext) -> Result[None, DomainError]:
            match await self._roles.save(role):
                case Failure() as failure:
                    return failure
                case Success():
                    ctx.created.append(role)
                    return Success(value=None)

        async def compensate(ctx: DefaultRolesContext) -> Result[bool, DomainError]:
            return await self._roles.delete(role.id)

        step_name = "create_role_" + role.name.lower().replace(" ", "_")
        return SagaStep(step_name, forward=forward, compensate=compensate)
