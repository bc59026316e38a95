"""Approver resolution.

The super admin capability is computed once when the acting user is resolved
and carried as a plain flag, so guards never join role tables themselves.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from uuid import UUID

from erpforms.core.config import get_settings

from .states import RoutingField


SUPER_ADMIN = "super_admin"


@dataclass(frozen=True)
class Actor:
    """The user performing a transition, with its resolved capabilities."""

    id: UUID
    name: Optional[str] = None
    capabilities: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_user(cls, user, *, super_admin_role: Optional[str] = None) -> "Actor":
        """
        Build an actor from a ``User`` model with its role assignments loaded.

        Args:
            user: User model instance
            super_admin_role: Role name granting the override (defaults to settings)
        """
        if isinstance(user, Actor):
            return user
        super_admin_role = super_admin_role or get_settings().super_admin_role
        role_names = {role.name for role in user.roles}
        capabilities = {SUPER_ADMIN} if super_admin_role in role_names else set()
        return cls(id=user.id, name=user.name, capabilities=frozenset(capabilities))

    def has_capability(self, capability: str) -> bool:
        return capability in self.capabilities

    @property
    def is_super_admin(self) -> bool:
        return self.has_capability(SUPER_ADMIN)


def resolve(actor: Actor, form, routing_field: RoutingField) -> bool:
    """Return True if ``actor`` is the approver selected in ``routing_field`` or a super admin."""
    if actor.is_super_admin:
        return True
    approver_id = getattr(form, routing_field.value)
    return approver_id is not None and approver_id == actor.id
