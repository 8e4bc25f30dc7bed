import pytest

from mams.core.exceptions import Forbidden, NotFound
from mams.core.permissions import BaseScope, require_role, resolve_scope
from mams.models import MilitaryBase, UserRole
from mams.schemas.auth import Identity


def test_admin_scope_covers_every_base(db, identities, seed):
    scope = resolve_scope(db, identities.admin)

    assert scope.all_bases
    assert scope.includes(seed.alpha)
    assert scope.includes(seed.bravo)
    assert scope.require(seed.bravo) == seed.bravo


def test_commander_scope_is_own_base(db, identities, seed):
    scope = resolve_scope(db, identities.cmd_alpha)

    assert scope.base_ids == frozenset({seed.alpha})
    assert scope.includes(seed.alpha)
    assert not scope.includes(seed.bravo)
    with pytest.raises(Forbidden):
        scope.require(seed.bravo)


def test_out_of_scope_entities_read_as_missing(db, identities, seed):
    scope = resolve_scope(db, identities.log_alpha)

    with pytest.raises(NotFound) as exc_info:
        scope.require_visible(seed.bravo, "Personnel", 42)
    assert exc_info.value.message == "Personnel 42 not found"


def test_restrict_filters_query_to_scope(db, identities, seed):
    scope = resolve_scope(db, identities.cmd_bravo)
    names = [b.name for b in scope.restrict(db.query(MilitaryBase), MilitaryBase.id).all()]
    assert names == ["Bravo"]

    everything = BaseScope().restrict(db.query(MilitaryBase), MilitaryBase.id).count()
    assert everything == 2


def test_commander_without_base_is_forbidden(db, seed):
    identity = Identity(id=999, role=UserRole.COMMANDER, base_id=None)

    with pytest.raises(Forbidden) as exc_info:
        resolve_scope(db, identity)
    assert "must be assigned to a base" in exc_info.value.message


def test_logistics_with_unknown_base_is_forbidden(db, seed):
    identity = Identity(id=999, role=UserRole.LOGISTICS, base_id=4040)

    with pytest.raises(Forbidden):
        resolve_scope(db, identity)


def test_require_role(identities):
    require_role(identities.admin, UserRole.ADMIN, UserRole.COMMANDER)

    with pytest.raises(Forbidden) as exc_info:
        require_role(identities.log_alpha, UserRole.ADMIN, UserRole.COMMANDER)
    assert exc_info.value.message == "Only admin, commander may perform this action"
