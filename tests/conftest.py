# tests/conftest.py
from __future__ import annotations

import base64
import os
from collections.abc import Callable, Generator, Iterator
from io import BytesIO
from itertools import count

import httpx
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from PIL import Image
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from photo_contest.db.session import Base, enable_sqlite_foreign_keys
from photo_contest.db.session import get_db as app_get_session
from photo_contest.main import app as fastapi_app
from photo_contest.models import Category, Contest
from photo_contest.schemas.contest import CategoryInput, ContestCreate
from photo_contest.services import admin_sessions
from photo_contest.services.contests import create_contest
from photo_contest.services.errors import UploadFailedError
from photo_contest.services.imaging import DecodedImage
from photo_contest.services.settings_store import VOTING_OPEN, set_setting
from photo_contest.services.storage import RemoteImageFetcher, get_image_fetcher, get_image_storage

TEST_DB_URL = "sqlite://"
ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]


class MemoryImageStorage:
    """Image storage double that keeps uploads in a dict."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.fail_uploads = False
        self._keys = count(1)

    async def upload(self, image: DecodedImage) -> str:
        if self.fail_uploads:
            raise UploadFailedError("Image storage is unavailable, please try again")
        reference = f"memory://{next(self._keys)}.{image.extension}"
        self.objects[reference] = image.data
        return reference

    async def delete(self, reference: str) -> None:
        self.objects.pop(reference, None)


class RemoteImageHost:
    """Serves linked images from a dict and records every request it sees."""

    def __init__(self) -> None:
        self.images: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self.images.get(str(request.url))
        if request.method != "GET" or body is None:
            return httpx.Response(404)
        return httpx.Response(200, content=body, headers={"Content-Type": "image/png"})

    def fetcher(self) -> RemoteImageFetcher:
        return RemoteImageFetcher(transport=httpx.MockTransport(self.handler))


def make_image_bytes(width: int = 1920, height: int = 1080, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    Image.new("RGB", (width, height), (40, 110, 200)).save(buffer, format=fmt)
    return buffer.getvalue()


def make_data_url(width: int = 1920, height: int = 1080, fmt: str = "PNG") -> str:
    mime = "image/jpeg" if fmt == "JPEG" else f"image/{fmt.lower()}"
    payload = base64.b64encode(make_image_bytes(width, height, fmt)).decode()
    return f"data:{mime};base64,{payload}"


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()

        # Services commit, so every test cleans the tables it touched.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture()
def image_storage() -> MemoryImageStorage:
    return MemoryImageStorage()


@pytest.fixture()
def remote_images() -> RemoteImageHost:
    return RemoteImageHost()


@pytest.fixture()
def image_fetcher(remote_images: RemoteImageHost) -> RemoteImageFetcher:
    return remote_images.fetcher()


@pytest.fixture(autouse=True)
def override_dependencies(
    app: FastAPI,
    db_session: Session,
    image_storage: MemoryImageStorage,
    image_fetcher: RemoteImageFetcher,
) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    app.dependency_overrides[get_image_fetcher] = lambda: image_fetcher
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)
        app.dependency_overrides.pop(get_image_storage, None)
        app.dependency_overrides.pop(get_image_fetcher, None)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(db_session: Session) -> dict[str, str]:
    """Return authorization headers carrying a live admin token."""
    token = admin_sessions.login(db_session, ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def contest_factory(db_session: Session) -> Callable[..., Contest]:
    def _create(name: str = "Fall Jam", categories: tuple[str, ...] = ("Best Vehicle", "Scenic")) -> Contest:
        return create_contest(
            db_session,
            ContestCreate(
                name=name,
                categories=[CategoryInput(name=category) for category in categories],
            ),
        )

    return _create


@pytest.fixture()
def active_contest(contest_factory: Callable[..., Contest]) -> Contest:
    """An active "Fall Jam" contest with two categories."""
    return contest_factory()


@pytest.fixture()
def vehicle_category(active_contest: Contest) -> Category:
    return active_contest.categories[0]


@pytest.fixture()
def scenic_category(active_contest: Contest) -> Category:
    return active_contest.categories[1]


@pytest.fixture()
def voting_open(db_session: Session) -> None:
    set_setting(db_session, VOTING_OPEN, True)
    db_session.commit()


@pytest.fixture(scope="session")
def image_data_url() -> str:
    """A 1920x1080 PNG screenshot as a data URL."""
    return make_data_url()
