import os

# Settings are read once on import; configure the environment first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from feria.core.security import hash_password
from feria.core.storage import StorageService, StoredFile, UploadedFile, get_storage
from feria.database import get_session
from feria.main import app
from feria.models.design import BoothModel, Stand
from feria.models.user import User

PASSWORD = "secret"


class FakeStorage(StorageService):
    """In-memory bucket with the same URL layout as Supabase public URLs."""

    base = "https://test.supabase.co/storage/v1/object/public/assets/"

    def __init__(self):
        super().__init__(client=None, bucket="assets")
        self.objects: dict[str, bytes] = {}
        self.counter = 0

    def upload(self, file: UploadedFile, folder: str) -> StoredFile:
        self.counter += 1
        file_id = f"{folder}/{self.counter}-{file.filename}"
        self.objects[file_id] = file.data
        return StoredFile(file_id=file_id, url=self.base + file_id)

    def delete(self, file_id: str) -> None:
        self.objects.pop(file_id, None)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(engine, storage):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_storage] = lambda: storage
    # https so the Secure session cookie is sent back
    yield TestClient(app, base_url="https://testserver")
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    def _make_user(name: str, role: str = "co", **fields) -> User:
        user = User(
            name=name,
            email=f"{name}@example.com",
            password_hash=hash_password(PASSWORD),
            role=role,
            **fields,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def catalog(session):
    stand = Stand(name="Corner", file_url="https://cdn.example.com/stand.glb")
    model = BoothModel(name="Desk", file_url="https://cdn.example.com/desk.glb")
    session.add(stand)
    session.add(model)
    session.commit()
    session.refresh(stand)
    session.refresh(model)
    return stand, model


def login(client: TestClient, name: str, password: str = PASSWORD):
    """Cookie login; the client keeps the session cookie."""
    resp = client.post("/auth/login", json={"nameOrEmail": name, "password": password})
    assert resp.status_code == 200, resp.text
    return resp


def bearer(client: TestClient, name: str, password: str = PASSWORD) -> dict[str, str]:
    """Token login; returns an Authorization header."""
    resp = client.post("/auth/logging/unity", json={"nameOrEmail": name, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}
