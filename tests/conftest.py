# /tests/conftest.py

import itertools
import os

# Must be set before anything from the package reads its settings.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_TIMEZONE", "Asia/Tashkent")

import pytest
import requests
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from educenter.core.permissions import Principal, RoleName
from educenter.core.security import create_access_token, get_password_hash
from educenter.db.base import Base
from educenter.db.database import get_db
from educenter.main import app
from educenter.services import role_service
from educenter.services.database_service import DatabaseService

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def session():
    """A fresh in-memory schema for every test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(session):
    service = DatabaseService(session)
    role_service.ensure_default_roles(service)
    return service


@pytest.fixture(autouse=True)
def offline_currency(mocker):
    """The exchange-rate feed is unreachable unless a test says otherwise."""
    return mocker.patch(
        "educenter.services.currency_service.requests.get",
        side_effect=requests.ConnectionError("offline"),
    )


class Factory:
    """Builds committed rows with unique phones and usernames."""

    def __init__(self, db: DatabaseService):
        self.db = db
        self._seq = itertools.count(1)

    def user(self, role: str, first_name: str = None, last_name: str = "Test", password: str = None, **fields):
        n = next(self._seq)
        with self.db.transaction():
            user = self.db.add_user({
                "first_name": first_name or f"{role}{n}",
                "last_name": last_name,
                "phone": f"+99890000{n:04d}",
                "username": f"{role.lower()}{n}",
                "password_hash": get_password_hash(password) if password else None,
                "role_id": self.db.get_role_by_name(role).id,
                **fields,
            })
        return user

    def student(self, **fields):
        return self.user(RoleName.STUDENT.value, **fields)

    def teacher(self, percent=10, **fields):
        return self.user(RoleName.TEACHER.value, percent=percent, **fields)

    def admin(self, **fields):
        return self.user(RoleName.ADMIN.value, **fields)

    def super_admin(self, **fields):
        return self.user(RoleName.SUPER_ADMIN.value, **fields)

    def course(self, name: str = None):
        with self.db.transaction():
            course = self.db.add_course({"name": name or f"Course {next(self._seq)}"})
        return course

    def group(self, course=None, teacher=None, price=100000, students=(), days=("Monday", "Wednesday", "Friday"),
              start_time="14:00", end_time="16:00", status="active", name=None):
        course = course or self.course()
        with self.db.transaction():
            group = self.db.add_group({
                "name": name or f"Group {next(self._seq)}",
                "course_id": course.id,
                "teacher_id": teacher.id if teacher else None,
                "price": price,
                "days_of_week": list(days),
                "start_time": start_time,
                "end_time": end_time,
                "status": status,
            })
            if students:
                self.db.replace_roster(group, list(students))
        return group


@pytest.fixture
def factory(db):
    return Factory(db)


def principal_of(user) -> Principal:
    return Principal(id=user.id, username=user.username, role=RoleName(user.role_name))


def auth_header(user) -> dict:
    token = create_access_token(user.id, user.username, user.role_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(session, db):
    """TestClient bound to the test session. The app lifespan is not started."""

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def as_principal():
    return principal_of


@pytest.fixture
def auth():
    return auth_header


@pytest.fixture
def factory_for():
    """Builds a Factory over any DatabaseService, for tests with their own engine."""
    return Factory
