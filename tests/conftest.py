import os
import shutil
import tempfile
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

# Settings are read at import time, so the environment must be in place first.
_TEST_DIR = Path(tempfile.mkdtemp(prefix="hms-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("REDIS_URL", None)

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

import app.models.registry  # noqa: E402,F401
from app.core.cache import reset_redis_client  # noqa: E402
from app.core.database import SessionLocal, engine  # noqa: E402
from app.core.security import get_password_hash  # noqa: E402
from app.main import app as fastapi_app  # noqa: E402
from app.models.base import Base  # noqa: E402
from app.models.medicine import Medicine  # noqa: E402
from app.models.patient import Patient  # noqa: E402
from app.models.user import RoleName, User  # noqa: E402
from tests.helpers import FakeRedis, auth_header, persist  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def _schema():
    Base.metadata.create_all(engine)
    yield
    engine.dispose()
    shutil.rmtree(_TEST_DIR, ignore_errors=True)


@pytest.fixture(autouse=True)
def _clean_state():
    reset_redis_client()
    yield
    reset_redis_client()
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())


@pytest.fixture
def client():
    return TestClient(fastapi_app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_redis():
    redis_client = FakeRedis()
    reset_redis_client(redis_client)
    yield redis_client
    reset_redis_client()


@pytest.fixture
def make_user():
    def _make(username: str, role: RoleName = RoleName.STAFF, password: str = "secret123", **fields) -> User:
        return persist(
            User(
                username=username,
                hashed_password=get_password_hash(password),
                role=role.value,
                name=fields.pop("name", username.title()),
                **fields,
            )
        )

    return _make


@pytest.fixture
def staff_user(make_user):
    return make_user("frontdesk", RoleName.STAFF, name="Front Desk")


@pytest.fixture
def admin_user(make_user):
    return make_user("admin", RoleName.ADMIN, name="Administrator")


@pytest.fixture
def staff_headers(staff_user):
    return auth_header(staff_user)


@pytest.fixture
def admin_headers(admin_user):
    return auth_header(admin_user)


@pytest.fixture
def make_patient():
    def _make(name: str = "Ravi Kumar", **fields) -> Patient:
        return persist(
            Patient(
                patient_code=fields.pop("patient_code", f"TEST-{uuid4().hex[:8]}"),
                name=name,
                age=fields.pop("age", 42),
                gender=fields.pop("gender", "Male"),
                **fields,
            )
        )

    return _make


@pytest.fixture
def patient(make_patient):
    return make_patient()


@pytest.fixture
def make_medicine():
    def _make(name: str, quantity: int, mrp: str = "10.00", **fields) -> Medicine:
        return persist(
            Medicine(
                medicine_name=name,
                batch_number=fields.pop("batch_number", f"B-{uuid4().hex[:6].upper()}"),
                quantity=quantity,
                mrp=Decimal(mrp),
                expiry_date=fields.pop("expiry_date", date(2030, 12, 31)),
                **fields,
            )
        )

    return _make

