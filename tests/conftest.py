import os

# Configure the application before it is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Callable, List, Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from campus_dashboard.app import app  # noqa: E402
from campus_dashboard.core.database import SessionLocal, engine  # noqa: E402
from campus_dashboard.models.base import Base  # noqa: E402
from campus_dashboard.models.course import CourseModel  # noqa: E402
from campus_dashboard.models.user import UserModel  # noqa: E402
from campus_dashboard.utils.course_manager import CourseManager  # noqa: E402
from campus_dashboard.utils.user_manager import UserManager  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture(autouse=True)
def reset_database():
    """Give every test empty tables."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db) -> Callable[..., UserModel]:
    counter = {"n": 0}

    def _make(
        name: Optional[str] = None,
        role: str = "student",
        program: Optional[str] = "DTI",
        email: Optional[str] = None,
        password: Optional[str] = PASSWORD,
    ) -> UserModel:
        counter["n"] += 1
        name = name or f"{role.title()} {counter['n']}"
        email = email or f"{role}{counter['n']}@example.com"
        return UserManager(db).create_user(
            name=name, email=email, program=program, role=role, password=password
        )

    return _make


@pytest.fixture
def make_course(db) -> Callable[..., CourseModel]:
    def _make(code: str = "ds", title: str = "Data Science", programs: List[str] = ("DTI",)) -> CourseModel:
        return CourseManager(db).upsert_course(code, title, list(programs))

    return _make


@pytest.fixture
def course(make_course) -> CourseModel:
    return make_course()


def login(client: TestClient, user: UserModel, password: str = PASSWORD) -> TestClient:
    response = client.post(
        "/api/auth/login", json={"email": user.email, "password": password}
    )
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def student(make_user) -> UserModel:
    return make_user(name="Anna Student", role="student", program="DTI")


@pytest.fixture
def professor(make_user) -> UserModel:
    return make_user(name="Paul Professor", role="professor", program=None)


@pytest.fixture
def admin(make_user) -> UserModel:
    return make_user(name="Ada Admin", role="admin", program="DI")


@pytest.fixture
def student_client(student):
    with TestClient(app) as test_client:
        yield login(test_client, student)


@pytest.fixture
def professor_client(professor):
    with TestClient(app) as test_client:
        yield login(test_client, professor)


@pytest.fixture
def admin_client(admin):
    with TestClient(app) as test_client:
        yield login(test_client, admin)
