import pytest

from mams.core.exceptions import Forbidden, InsufficientStock, InvalidAssignee, InvalidInput, NotFound
from mams.models import AssigneeType, Assignment, UserRole
from mams.schemas.assignment import PersonnelAssignee, UserAssignee
from mams.schemas.auth import Identity
from mams.services import assignment_service


def test_assign_and_return_round_trip(db, seed, identities, set_stock, stock, count):
    set_stock(seed.alpha, seed.radio, 5)

    assignment = assignment_service.assign(
        db, identities.cmd_alpha, seed.alpha, seed.radio, PersonnelAssignee(id=seed.soldier), 5
    )
    assignment_id = assignment.id

    assert assignment.assignee_type == AssigneeType.PERSONNEL
    assert assignment.assignee_id == seed.soldier
    assert assignment.assignee_user_id is None
    assert stock(seed.alpha, seed.radio) == (0, 5)
    assert count(Assignment) == 1

    details = assignment_service.return_assignment(db, identities.cmd_alpha, assignment_id)

    assert details.quantity == 5
    assert details.assignee_type == "personnel"
    assert stock(seed.alpha, seed.radio) == (5, 0)
    assert count(Assignment) == 0


def test_commander_assigns_within_own_base_by_default(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 3)

    assignment = assignment_service.assign(
        db, identities.cmd_alpha, None, seed.rifle, PersonnelAssignee(id=seed.soldier), 2
    )

    assert assignment.base_id == seed.alpha
    assert stock(seed.alpha, seed.rifle) == (1, 2)


def test_assign_to_user_of_same_base(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 3)

    assignment = assignment_service.assign(
        db, identities.admin, seed.alpha, seed.rifle, UserAssignee(id=seed.log_alpha), 1
    )

    assert assignment.assignee_type == AssigneeType.USER
    assert assignment.assignee_id == seed.log_alpha
    assert stock(seed.alpha, seed.rifle) == (2, 1)


@pytest.mark.parametrize("quantity", [0, -1, 2.5])
def test_assign_rejects_bad_quantity(db, seed, identities, set_stock, stock, quantity):
    set_stock(seed.alpha, seed.rifle, 3)

    with pytest.raises(InvalidInput):
        assignment_service.assign(
            db, identities.cmd_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), quantity
        )
    assert stock(seed.alpha, seed.rifle) == (3, 0)


def test_inactive_personnel_cannot_receive_assets(db, seed, identities, set_stock, stock, count):
    set_stock(seed.alpha, seed.rifle, 3)

    with pytest.raises(InvalidAssignee) as exc_info:
        assignment_service.assign(
            db, identities.cmd_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.retired), 1
        )

    assert exc_info.value.kind == "invalid_assignee"
    assert stock(seed.alpha, seed.rifle) == (3, 0)
    assert count(Assignment) == 0


@pytest.mark.parametrize(
    "assignee",
    [
        lambda seed: PersonnelAssignee(id=seed.outsider),
        lambda seed: PersonnelAssignee(id=31337),
        lambda seed: UserAssignee(id=seed.cmd_bravo),
        lambda seed: UserAssignee(id=31337),
    ],
    ids=["personnel-other-base", "personnel-missing", "user-other-base", "user-missing"],
)
def test_assignee_must_exist_at_the_base(db, seed, identities, set_stock, assignee):
    set_stock(seed.alpha, seed.rifle, 3)

    with pytest.raises(InvalidAssignee):
        assignment_service.assign(db, identities.admin, seed.alpha, seed.rifle, assignee(seed), 1)


def test_assign_more_than_available(db, seed, identities, set_stock, stock, count):
    set_stock(seed.alpha, seed.rifle, 2, assigned=4)

    with pytest.raises(InsufficientStock):
        assignment_service.assign(
            db, identities.cmd_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), 3
        )

    assert stock(seed.alpha, seed.rifle) == (2, 4)
    assert count(Assignment) == 0


def test_logistics_cannot_assign(db, seed, identities, set_stock):
    set_stock(seed.alpha, seed.rifle, 2)

    with pytest.raises(Forbidden):
        assignment_service.assign(
            db, identities.log_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), 1
        )


def test_commander_cannot_assign_at_another_base(db, seed, identities, set_stock):
    set_stock(seed.bravo, seed.rifle, 2)

    with pytest.raises(Forbidden):
        assignment_service.assign(
            db, identities.cmd_alpha, seed.bravo, seed.rifle, PersonnelAssignee(id=seed.outsider), 1
        )


def test_unscoped_commander_is_forbidden(db, seed, set_stock):
    set_stock(seed.alpha, seed.rifle, 2)
    orphan = Identity(id=seed.cmd_alpha, role=UserRole.COMMANDER, base_id=None)

    with pytest.raises(Forbidden):
        assignment_service.assign(db, orphan, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), 1)


def test_return_outside_scope_reads_as_missing(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 2)
    assignment_id = assignment_service.assign(
        db, identities.cmd_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), 2
    ).id

    with pytest.raises(NotFound):
        assignment_service.return_assignment(db, identities.cmd_bravo, assignment_id)

    assert stock(seed.alpha, seed.rifle) == (0, 2)


def test_return_twice(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 2)
    assignment_id = assignment_service.assign(
        db, identities.cmd_alpha, seed.alpha, seed.rifle, PersonnelAssignee(id=seed.soldier), 2
    ).id

    assignment_service.return_assignment(db, identities.admin, assignment_id)
    with pytest.raises(NotFound):
        assignment_service.return_assignment(db, identities.admin, assignment_id)

    assert stock(seed.alpha, seed.rifle) == (2, 0)


def test_return_unknown_assignment(db, seed, identities):
    with pytest.raises(NotFound):
        assignment_service.return_assignment(db, identities.admin, 404)
