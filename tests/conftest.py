"""
Pytest configuration and shared fixtures.

- engine / db: file-backed SQLite database with the schema and achievements seeded
- make_user / user: local user rows
- candidate: a mapping API place descriptor
- draft_payload: a valid review submission body
- client: TestClient with database, auth, blob store, maps and LLM wired to fakes
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import MagicMock  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import event  # noqa: E402

from bocado.db.base import Base  # noqa: E402
from bocado.db.init_db import seed_achievements  # noqa: E402
from bocado.db.session import build_engine, get_db, make_session_factory  # noqa: E402
from bocado.models.user import User  # noqa: E402
from bocado.schemas.place import PlaceCandidate  # noqa: E402
from bocado.services.auth import AuthenticatedUser  # noqa: E402
from bocado.services.llm import LLMService, get_llm_service  # noqa: E402
from bocado.services.maps import MapsClient, get_maps_client  # noqa: E402
from bocado.services.photos import PhotoService, get_photo_service  # noqa: E402
from bocado.utils.s3_storage import S3StorageManager  # noqa: E402

TEST_TOKENS = {
    "token-ana": AuthenticatedUser(id="user-ana", email="ana@example.com", full_name="Ana"),
    "token-beto": AuthenticatedUser(id="user-beto", email="beto@example.com", full_name="Beto"),
}


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'bocado-test.db'}")

    @event.listens_for(engine, "connect")
    def _wal(dbapi_connection, connection_record):
        # readers must not block the request sessions
        dbapi_connection.execute("PRAGMA journal_mode=WAL")

    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)
    with factory() as db:
        seed_achievements(db)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_user(db):
    def _make(user_id: str = "user-ana", points: int = 0) -> User:
        user = User(id=user_id, email=f"{user_id}@example.com", full_name=user_id, points=points)
        db.add(user)
        db.commit()
        return user

    return _make


@pytest.fixture
def user(make_user) -> User:
    return make_user()


@pytest.fixture
def candidate() -> PlaceCandidate:
    return PlaceCandidate(
        external_id="ChIJ-el-cairo",
        name="Bar El Cairo",
        address="Santa Fe 1102, S2000 Rosario, Santa Fe, Argentina",
        latitude=-32.9455,
        longitude=-60.6396,
    )


@pytest.fixture
def draft_payload() -> dict:
    """Valid review submission body for a place not yet in the database."""
    return {
        "place": {
            "google_place_id": "ChIJ-el-cairo",
            "name": "Bar El Cairo",
            "formatted_address": "Santa Fe 1102, S2000 Rosario, Santa Fe, Argentina",
            "latitude": -32.9455,
            "longitude": -60.6396,
        },
        "dish_name": "Lomito",
        "food_taste": 9,
        "presentation": 8,
        "portion_size": 7,
        "music_acoustics": 6,
        "ambiance": 9,
        "furniture_comfort": 7,
        "service": 8,
        "price_range": "15000_20000",
        "restaurant_category": "BARES",
        "comment": "x" * 310,
        "photo_urls": ["https://bucket.example.com/review-photos/user-ana_temp_0_1.jpg"],
    }


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def photo_service(s3_client) -> PhotoService:
    storage = S3StorageManager(
        bucket_name="bocado-test",
        public_base_url="https://bucket.example.com",
        s3_client=s3_client,
    )
    return PhotoService(storage, max_bytes=1024, max_photos=6, workers=2, timeout_seconds=5)


@pytest.fixture
def maps_handler():
    """Replace `.response` to change what the fake mapping API answers."""

    class Handler:
        response = httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
        requests: list = []

        def __call__(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.response

    return Handler()


@pytest.fixture
def maps_client(maps_handler) -> MapsClient:
    http_client = httpx.Client(
        base_url="https://maps.test/maps/api/place",
        transport=httpx.MockTransport(maps_handler),
    )
    return MapsClient(api_key="test-key", http_client=http_client)


@pytest.fixture
def openai_client() -> MagicMock:
    client = MagicMock()
    completion = MagicMock()
    completion.choices = [MagicMock()]
    completion.choices[0].message.content = "Texto mejorado"
    client.chat.completions.create.return_value = completion
    return client


@pytest.fixture
def client(session_factory, photo_service, maps_client, openai_client, monkeypatch):
    from bocado.main import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr("bocado.api.deps.verify_token", TEST_TOKENS.get)
    monkeypatch.setattr("bocado.api.endpoints.notifications.verify_token", TEST_TOKENS.get)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_photo_service] = lambda: photo_service
    app.dependency_overrides[get_maps_client] = lambda: maps_client
    app.dependency_overrides[get_llm_service] = lambda: LLMService(client=openai_client)

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def auth():
    def _headers(token: str = "token-ana") -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    return _headers
