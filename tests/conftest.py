"""
Pytest fixtures: a fresh file-backed SQLite database per test, a TestClient
wired to it, seeded bases/users/personnel and bearer tokens per role.
"""
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from mams.core.security import create_access_token, get_password_hash
from mams.db.database import Base, build_engine, get_db
from mams.main import app
from mams.models import Asset, BaseAsset, MilitaryBase, Personnel, User, UserRole
from mams.schemas.auth import Identity

PASSWORD = "s3cret-pass"
# Hashed once; bcrypt is deliberately slow
PASSWORD_HASH = get_password_hash(PASSWORD)


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'mams_test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    # Objects stay readable after commit without opening a new transaction
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed(session_factory):
    db = session_factory()
    alpha = MilitaryBase(name="Alpha", location="North Ridge")
    bravo = MilitaryBase(name="Bravo", location="South Coast")
    db.add_all([alpha, bravo])
    db.flush()

    rifle = Asset(name="Rifle", serial_number="R-001", description="Standard issue rifle")
    radio = Asset(name="Radio")
    admin = User(username="admin", hashed_password=PASSWORD_HASH, role=UserRole.ADMIN, is_active=True)
    cmd_alpha = User(
        username="cmd_alpha", hashed_password=PASSWORD_HASH, role=UserRole.COMMANDER,
        base_id=alpha.id, is_active=True,
    )
    cmd_bravo = User(
        username="cmd_bravo", hashed_password=PASSWORD_HASH, role=UserRole.COMMANDER,
        base_id=bravo.id, is_active=True,
    )
    log_alpha = User(
        username="log_alpha", hashed_password=PASSWORD_HASH, role=UserRole.LOGISTICS,
        base_id=alpha.id, is_active=True,
    )
    soldier = Personnel(
        name="Ada Stone", rank="Private", service_number="SN-001", base_id=alpha.id,
        assigned_unit="1st Platoon", is_active=True,
    )
    retired = Personnel(
        name="Ben Hale", rank="Sergeant", service_number="SN-002", base_id=alpha.id, is_active=False,
    )
    outsider = Personnel(
        name="Cy Moss", rank="Corporal", service_number="SN-003", base_id=bravo.id, is_active=True,
    )
    db.add_all([rifle, radio, admin, cmd_alpha, cmd_bravo, log_alpha, soldier, retired, outsider])
    db.commit()

    ids = SimpleNamespace(
        alpha=alpha.id,
        bravo=bravo.id,
        rifle=rifle.id,
        radio=radio.id,
        admin=admin.id,
        cmd_alpha=cmd_alpha.id,
        cmd_bravo=cmd_bravo.id,
        log_alpha=log_alpha.id,
        soldier=soldier.id,
        retired=retired.id,
        outsider=outsider.id,
    )
    db.close()
    return ids


@pytest.fixture
def identities(seed):
    return SimpleNamespace(
        admin=Identity(id=seed.admin, role=UserRole.ADMIN),
        cmd_alpha=Identity(id=seed.cmd_alpha, role=UserRole.COMMANDER, base_id=seed.alpha),
        cmd_bravo=Identity(id=seed.cmd_bravo, role=UserRole.COMMANDER, base_id=seed.bravo),
        log_alpha=Identity(id=seed.log_alpha, role=UserRole.LOGISTICS, base_id=seed.alpha),
    )


def auth_headers(identity: Identity) -> dict:
    token = create_access_token(subject=identity.id, role=identity.role.value, base_id=identity.base_id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers(identities):
    return SimpleNamespace(
        admin=auth_headers(identities.admin),
        cmd_alpha=auth_headers(identities.cmd_alpha),
        cmd_bravo=auth_headers(identities.cmd_bravo),
        log_alpha=auth_headers(identities.log_alpha),
    )


@pytest.fixture
def set_stock(session_factory):
    """Write a ledger row directly, bypassing the workflows."""
    def _set(base_id, asset_id, available, assigned=0):
        session = session_factory()
        try:
            row = session.query(BaseAsset).filter_by(base_id=base_id, asset_id=asset_id).first()
            if row is None:
                row = BaseAsset(base_id=base_id, asset_id=asset_id)
                session.add(row)
            row.available_qty = available
            row.assigned_qty = assigned
            session.commit()
        finally:
            session.close()
    return _set


@pytest.fixture
def stock(session_factory):
    """Read (available, assigned) in a short-lived session."""
    def _get(base_id, asset_id):
        session = session_factory()
        try:
            row = session.query(BaseAsset).filter_by(base_id=base_id, asset_id=asset_id).first()
            if row is None:
                return (0, 0)
            return (row.available_qty, row.assigned_qty)
        finally:
            session.close()
    return _get


@pytest.fixture
def count(session_factory):
    def _count(model, **filters):
        session = session_factory()
        try:
            return session.query(model).filter_by(**filters).count()
        finally:
            session.close()
    return _count
