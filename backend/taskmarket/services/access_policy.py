"""Role, ownership and status guards shared by every workflow operation."""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Union

from taskmarket.core.errors import Forbidden, InvalidTransition
from taskmarket.models.user import User

StatusLike = Union[str, Enum]


@dataclass(frozen=True)
class Actor:
    """The authenticated caller of a workflow operation."""
    id: str
    role: str

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(id=str(user.id), role=user.role)


def _value(status: StatusLike) -> str:
    return status.value if isinstance(status, Enum) else status


def require_role(actor: Actor, *roles: StatusLike) -> None:
    """Raise Forbidden unless the actor holds one of the roles."""
    allowed = {_value(role) for role in roles}
    if actor.role not in allowed:
        raise Forbidden(
            f"Role '{actor.role}' may not perform this action (requires {', '.join(sorted(allowed))})",
            entity="user",
            field="role",
        )


def require_ownership(actor: Actor, owner_id: str, entity: str) -> None:
    """Raise Forbidden unless the actor owns the entity."""
    if str(owner_id) != str(actor.id):
        raise Forbidden(
            f"Not authorized - you do not own this {entity}",
            entity=entity,
            field="owner",
        )


def require_status(
    current: StatusLike,
    allowed: Iterable[StatusLike],
    entity: str,
    field: str = "status",
) -> None:
    """Raise InvalidTransition unless the current status is one of the allowed ones."""
    allowed_values = [_value(status) for status in allowed]
    current_value = _value(current)
    if current_value not in allowed_values:
        raise InvalidTransition(
            f"Cannot perform this action on {entity} with {field} '{current_value}' "
            f"(expected {' or '.join(allowed_values)})",
            entity=entity,
            field=field,
        )
