"""
Sentra - test configuration and fixtures
"""
import os
from typing import AsyncGenerator, List, Optional, Tuple

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Point the app at a throwaway database before anything reads settings
os.environ["DATABASE_URI"] = "sqlite+aiosqlite:///./test.db"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOADS_DIR"] = "./test_uploads"

from main import app
from sentra.core.security import create_access_token, get_password_hash
from sentra.db.base_class import Base
from sentra.db.session import get_db
from sentra.models import User, UserRole
from sentra.services.storage import StorageBackend, StoredFile, get_storage

fake = Faker()

TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(bind=test_engine, class_=AsyncSession, expire_on_commit=False)


class FakeStorage(StorageBackend):
    """Keeps uploads in memory and hands back predictable URLs."""

    def __init__(self):
        self.saved: List[Tuple[str, bytes, Optional[str]]] = []
        self.deleted: List[str] = []

    async def save(self, filename: str, content: bytes, content_type: Optional[str] = None) -> StoredFile:
        self.saved.append((filename, content, content_type))
        return StoredFile(filename=filename, url=f"https://files.test/{len(self.saved)}/{filename}")

    async def delete(self, stored: StoredFile) -> None:
        self.deleted.append(stored.url)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh schema and session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
async def client(db_session: AsyncSession, storage: FakeStorage) -> AsyncGenerator[AsyncClient, None]:
    """Test client bound to the test session and fake storage"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(db_session: AsyncSession, role: UserRole = UserRole.STUDENT, password: str = "password123") -> User:
    user = User(
        name=fake.name(),
        email=f"{fake.unique.user_name()}@campus.edu",
        hashed_password=get_password_hash(password),
        role=role,
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


def bearer(user: User) -> dict:
    token = create_access_token(subject=user.id, role=user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def student(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest.fixture
async def other_student(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await make_user(db_session, role=UserRole.ADMIN)


@pytest.fixture
def student_headers(student: User) -> dict:
    return bearer(student)


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user)


@pytest.fixture
def incident_form() -> dict:
    return {
        "title": "Laptop stolen from library",
        "category": "Theft",
        "description": "My laptop was taken from a study desk on the second floor.",
        "incidentDate": "2024-01-01",
        "location": "Main library",
    }


@pytest.fixture
def report_incident(client: AsyncClient, incident_form: dict):
    """Submit an incident through the API and return the created incident JSON"""
    async def _report(headers: Optional[dict] = None, **overrides) -> dict:
        data = {**incident_form, **overrides}
        response = await client.post("/api/incidents", data=data, headers=headers or {})
        assert response.status_code == 201, response.text
        return response.json()["incident"]

    return _report


@pytest.fixture
def headers_for():
    """Build bearer headers for any user"""
    return bearer
