import pytest
from sqlalchemy.exc import OperationalError

from mams.core.exceptions import AlreadyProcessed, Forbidden, InvalidInput, NotFound, StorageFailure
from mams.models import AuditLog, Purchase, PurchaseStatus
from mams.services import ledger_service, purchase_service


def test_commander_requests_purchase_for_own_base(db, seed, identities, stock):
    purchase = purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, 10)

    assert purchase.status == PurchaseStatus.PENDING
    assert purchase.created_by == seed.cmd_alpha
    assert purchase.quantity == 10
    # Nothing reaches the ledger until approval
    assert stock(seed.alpha, seed.rifle) == (0, 0)


def test_admin_may_request_for_any_base(db, seed, identities):
    purchase = purchase_service.request_purchase(db, identities.admin, seed.bravo, seed.radio, 3)
    assert purchase.base_id == seed.bravo


def test_commander_cannot_request_for_another_base(db, seed, identities, count):
    with pytest.raises(Forbidden):
        purchase_service.request_purchase(db, identities.cmd_alpha, seed.bravo, seed.rifle, 1)
    assert count(Purchase) == 0


def test_logistics_cannot_request_purchases(db, seed, identities):
    with pytest.raises(Forbidden):
        purchase_service.request_purchase(db, identities.log_alpha, seed.alpha, seed.rifle, 1)


@pytest.mark.parametrize("quantity", [0, -5, 2.5])
def test_request_rejects_bad_quantity(db, seed, identities, count, quantity):
    with pytest.raises(InvalidInput):
        purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, quantity)
    assert count(Purchase) == 0


def test_request_for_unknown_asset(db, seed, identities):
    with pytest.raises(NotFound):
        purchase_service.request_purchase(db, identities.admin, seed.alpha, 9999, 1)


def test_approval_credits_available_stock_once(db, seed, identities, stock, count):
    purchase_id = purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, 10).id

    approved = purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)

    assert approved.status == PurchaseStatus.APPROVED
    assert approved.approved_by == seed.admin
    assert stock(seed.alpha, seed.rifle) == (10, 0)

    with pytest.raises(AlreadyProcessed) as exc_info:
        purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)

    assert exc_info.value.message == f"Purchase {purchase_id} already approved"
    assert stock(seed.alpha, seed.rifle) == (10, 0)
    assert count(AuditLog, action="approve_purchase") == 1
    assert count(AuditLog, action="decide_purchase_refused") == 1


def test_approval_adds_to_existing_stock(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 4, assigned=1)
    purchase_id = purchase_service.request_purchase(db, identities.admin, seed.alpha, seed.rifle, 6).id

    purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)

    assert stock(seed.alpha, seed.rifle) == (10, 1)


def test_rejection_leaves_ledger_untouched(db, seed, identities, set_stock, stock):
    set_stock(seed.alpha, seed.rifle, 2)
    purchase_id = purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, 5).id

    rejected = purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=False)

    assert rejected.status == PurchaseStatus.REJECTED
    assert stock(seed.alpha, seed.rifle) == (2, 0)

    with pytest.raises(AlreadyProcessed):
        purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)
    assert stock(seed.alpha, seed.rifle) == (2, 0)


def test_only_admin_decides(db, seed, identities, stock):
    purchase_id = purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, 5).id

    with pytest.raises(Forbidden):
        purchase_service.decide_purchase(db, identities.cmd_alpha, purchase_id, approve=True)
    assert stock(seed.alpha, seed.rifle) == (0, 0)


def test_decide_unknown_purchase(db, seed, identities):
    with pytest.raises(NotFound):
        purchase_service.decide_purchase(db, identities.admin, 4242, approve=True)


def _locked_ledger(*args, **kwargs):
    raise OperationalError("UPDATE base_assets", {}, Exception("database is locked"))


def test_storage_failure_rolls_back_the_approval(db, seed, identities, set_stock, stock, count, monkeypatch):
    set_stock(seed.alpha, seed.rifle, 4)
    purchase_id = purchase_service.request_purchase(db, identities.cmd_alpha, seed.alpha, seed.rifle, 10).id
    monkeypatch.setattr(ledger_service, "adjust", _locked_ledger)

    with pytest.raises(StorageFailure):
        purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)

    assert count(Purchase, id=purchase_id, status=PurchaseStatus.PENDING) == 1
    assert stock(seed.alpha, seed.rifle) == (4, 0)
    assert count(AuditLog, action="approve_purchase") == 0
    assert count(AuditLog, action="decide_purchase_refused") == 1

    # Once the database recovers the same request can still be decided
    monkeypatch.undo()
    purchase_service.decide_purchase(db, identities.admin, purchase_id, approve=True)
    assert stock(seed.alpha, seed.rifle) == (14, 0)
