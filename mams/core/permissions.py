"""
Authorization scope: which bases a principal may act on.

Admins act on every base. Commanders and logistics officers act on exactly
the base recorded in their identity, which must reference an existing base.
"""
from typing import FrozenSet, Optional

from sqlalchemy.orm import Session

from mams.core.exceptions import Forbidden, NotFound
from mams.models.military_base import MilitaryBase
from mams.models.user import UserRole
from mams.schemas.auth import Identity


class BaseScope:
    def __init__(self, base_ids: Optional[FrozenSet[int]] = None):
        # None means unrestricted
        self.base_ids = base_ids

    @property
    def all_bases(self) -> bool:
        return self.base_ids is None

    def includes(self, base_id: Optional[int]) -> bool:
        if base_id is None:
            return False
        return self.all_bases or base_id in self.base_ids

    def require(self, base_id: Optional[int]) -> int:
        if not self.includes(base_id):
            raise Forbidden(f"Not authorized to act on base {base_id}")
        return base_id

    def require_visible(self, base_id: Optional[int], entity: str, entity_id: int) -> None:
        """Entities outside the scope are reported as missing."""
        if not self.includes(base_id):
            raise NotFound(f"{entity} {entity_id} not found")

    def restrict(self, query, column):
        if self.all_bases:
            return query
        return query.filter(column.in_(self.base_ids))


def resolve_scope(db: Session, identity: Identity) -> BaseScope:
    if identity.role == UserRole.ADMIN:
        return BaseScope()

    if identity.base_id is None:
        raise Forbidden(f"{identity.role.value.capitalize()} must be assigned to a base")

    exists = db.query(MilitaryBase.id).filter(MilitaryBase.id == identity.base_id).first()
    if exists is None:
        raise Forbidden("Assigned base not found")

    return BaseScope(frozenset({identity.base_id}))


def has_any_role(identity: Identity, *roles: UserRole) -> bool:
    return identity.role in roles


def require_role(identity: Identity, *roles: UserRole) -> None:
    if not has_any_role(identity, *roles):
        allowed = ", ".join(role.value for role in roles)
        raise Forbidden(f"Only {allowed} may perform this action")
