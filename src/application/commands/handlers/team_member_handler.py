"""Team membership handlers.

Flow (add):
1. Saga step ``membership_insert``: add (team, user) membership
   (compensate: remove it, only if this saga added it)
2. Saga step ``member_tuple``: write user#member@team
3. Saga step ``audit``: TEAM_MEMBER_ADDED entry
4. Publish TeamMemberAdded

Removal mirrors it. Teams are single level: only users join teams.

Both handlers first require the team to be linked to the caller's org
(team -> org); a team of another org is reported as not found.
"""

from dataclasses import dataclass

from src.application.commands.authorization_commands import (
    AddTeamMember,
    RemoveTeamMember,
)
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
from src.domain.entities import ObjectRef, RelationTuple, SubjectRef, TeamMembership
from src.domain.enums import AuditAction, ObjectType, Relation, SubjectType
from src.domain.events import TeamMemberAdded, TeamMemberRemoved
from src.domain.protocols import (
    AuditProtocol,
    AuthorizationProtocol,
    EventBusProtocol,
    LoggerProtocol,
    TeamMembershipProtocol,
    TupleStoreProtocol,
)


@dataclass(slots=True, kw_only=True)
class MembershipContext(TupleSagaContext):
    membership: TeamMembership
    changed: bool = False

    @property
    def member_tuple(self) -> RelationTuple:
        return RelationTuple.of(
            SubjectRef(subject_type=SubjectType.USER, subject_id=self.membership.user_id),
            Relation.MEMBER,
            ObjectRef(object_type=ObjectType.TEAM, object_id=self.membership.team_id),
        )


class _TeamMemberHandler:
    def __init__(
        self,
        teams: TeamMembershipProtocol,
        tuples: TupleStoreProtocol,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._teams = teams
        self._tuples = tuples
        self._authorization = authorization
        self._audit = audit
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._logger = logger

    async def _ensure_team_in_org(
        self, team_id: str, org_id: str
    ) -> Result[None, DomainError]:
        team = ObjectRef(object_type=ObjectType.TEAM, object_id=team_id)
        match await self._tuples.parents(team):
            case Failure() as failure:
                return failure
            case Success(value=parents):
                pass
        if ObjectRef(object_type=ObjectType.ORG, object_id=org_id) in parents:
            return Success(value=None)
        return Failure(
            error=NotFoundError(
                code=ErrorCode.TEAM_NOT_FOUND,
                message=f"Team '{team_id}' not found in org '{org_id}'",
                resource_type="team",
                resource_id=team_id,
            )
        )

    def _membership_step(self, name: str, *, add: bool) -> SagaStep[MembershipContext]:
        apply, undo = (
            (self._teams.add_member, self._teams.remove_member)
            if add
            else (self._teams.remove_member, self._teams.add_member)
        )

        async def forward(ctx: MembershipContext) -> Result[None, DomainError]:
            match await apply(ctx.membership):
                case Failure() as failure:
                    return failure
                case Success(value=changed):
                    ctx.changed = changed
                    return Success(value=None)

        async def compensate(ctx: MembershipContext) -> Result[bool, DomainError] | None:
            if not ctx.changed:
                return None
            return await undo(ctx.membership)

        return SagaStep(name, forward=forward, compensate=compensate)


class AddTeamMemberHandler(_TeamMemberHandler):
    """Handler for AddTeamMember. Success(False) when already a member."""

    async def handle(self, cmd: AddTeamMember) -> Result[bool, DomainError]:
        if isinstance(owned := await self._ensure_team_in_org(cmd.team_id, cmd.org_id), Failure):
            return owned

        context = MembershipContext(
            membership=TeamMembership(team_id=cmd.team_id, user_id=cmd.user_id)
        )
        steps = [
            self._membership_step("membership_insert", add=True),
            write_tuples_step(
                "member_tuple",
                self._authorization,
                lambda ctx: [ctx.member_tuple],
                self._logger,
            ),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.TEAM_MEMBER_ADDED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Added user {cmd.user_id} to team {cmd.team_id}",
                    details={"team_id": cmd.team_id, "user_id": cmd.user_id},
                ),
            ),
        ]

        match await self._orchestrator.execute("add_team_member", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        await self._event_bus.publish(
            TeamMemberAdded(team_id=cmd.team_id, user_id=cmd.user_id, org_id=cmd.org_id)
        )
        return Success(value=context.changed)


class RemoveTeamMemberHandler(_TeamMemberHandler):
    """Handler for RemoveTeamMember. Success(False) when not a member."""

    async def handle(self, cmd: RemoveTeamMember) -> Result[bool, DomainError]:
        if isinstance(owned := await self._ensure_team_in_org(cmd.team_id, cmd.org_id), Failure):
            return owned

        context = MembershipContext(
            membership=TeamMembership(team_id=cmd.team_id, user_id=cmd.user_id)
        )
        steps = [
            self._membership_step("membership_delete", add=False),
            remove_tuples_step(
                "member_tuple",
                self._authorization,
                lambda ctx: [ctx.member_tuple],
                self._logger,
            ),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.TEAM_MEMBER_REMOVED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Removed user {cmd.user_id} from team {cmd.team_id}",
                    details={"team_id": cmd.team_id, "user_id": cmd.user_id},
                ),
            ),
        ]

        match await self._orchestrator.execute("remove_team_member", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        await self._event_bus.publish(
            TeamMemberRemoved(team_id=cmd.team_id, user_id=cmd.user_id, org_id=cmd.org_id)
        )
        return Success(value=context.changed)
