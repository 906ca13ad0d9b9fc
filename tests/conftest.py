import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from main import app
from core.database import Base, get_db
from core.security import get_current_user
from models.container import Container, ContainerStatus, UnitType
from models.vessel import Vessel
from services.config_service import reset_detention_config


class MockUser:
    def __init__(self, role: str) -> None:
        self.id = "00000000-0000-0000-0000-000000000001"
        self.role = role
        self.username = "test-user"
        self.name = "Test User"
        self.is_active = True


@pytest.fixture(autouse=True)
def _reset_config():
    reset_detention_config()
    yield
    reset_detention_config()


@pytest.fixture(scope="function")
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    def _override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_current_user] = lambda: MockUser("ADMIN")

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def make_vessel(db, vessel_id="v_test", name="MV OCEAN STAR", consignee="VINAPAPER", **extra) -> Vessel:
    vessel = Vessel(id=vessel_id, vessel_name=name, voyage_no="V123", consignee=consignee, **extra)
    db.add(vessel)
    db.commit()
    return vessel


def make_container(db, container_id, container_no, vessel_id="v_test", **extra) -> Container:
    values = dict(
        id=container_id,
        vessel_id=vessel_id,
        unit_type=UnitType.CONTAINER,
        container_no=container_no,
        plan_date="2026-01-10",
        size="40'HC",
        pkgs=16,
        weight=28.8,
        tk_nha_vc="TK1",
        tk_dnl_ola="DNL1",
        status=ContainerStatus.READY,
        worker_names=[],
    )
    values.update(extra)
    container = Container(**values)
    db.add(container)
    db.commit()
    return container
