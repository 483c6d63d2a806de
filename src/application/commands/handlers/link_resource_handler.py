"""Link resource handler.

Structural links carry inheritance (org admins reach every app of the org),
so a link is written when the child resource is created. Linking is
idempotent and needs no audit entry of its own.

A child keeps one parent per parent type. Linking an app that already
belongs to another org is a conflict: a second parent would hand the new
org's admins ``can_manage`` on an app they do not own.
"""

from src.application.commands.authorization_commands import LinkResource
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, DomainError
from src.core.result import Failure, Result, Success
from src.domain.protocols import (
    AuthorizationProtocol,
    LoggerProtocol,
    TupleStoreProtocol,
)


class LinkResourceHandler:
    """Handler for LinkResource."""

    def __init__(
        self,
        tuples: TupleStoreProtocol,
        authorization: AuthorizationProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._tuples = tuples
        self._authorization = authorization
        self._logger = logger

    async def handle(self, cmd: LinkResource) -> Result[bool, DomainError]:
        """Returns Success(True) when linked, Success(False) when already linked.

        Failure(ConflictError) when the child already has a different parent
        of the same type.
        """
        match await self._tuples.parents(cmd.child):
            case Failure() as failure:
                return failure
            case Success(value=parents):
                pass

        owners = [
            parent
            for parent in parents
            if parent.object_type is cmd.parent.object_type and parent != cmd.parent
        ]
        if owners:
            self._logger.warning(
                "resource_link_rejected",
                child=str(cmd.child),
                parent=str(cmd.parent),
                existing_parent=str(owners[0]),
                actor_id=cmd.actor_id,
            )
            return Failure(
                error=ConflictError(
                    code=ErrorCode.RESOURCE_ALREADY_LINKED,
                    message=f"{cmd.child} already belongs to another "
                    f"{cmd.parent.object_type.value}",
                    resource_type=cmd.child.object_type.value,
                    conflicting_field="parent",
                )
            )

        result = await self._authorization.link_parent(cmd.child, cmd.parent)
        self._logger.debug(
            "resource_linked",
            child=str(cmd.child),
            parent=str(cmd.parent),
            org_id=cmd.org_id,
            outcome=type(result).__name__,
        )
        return result
