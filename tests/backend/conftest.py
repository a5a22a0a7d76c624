import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from tortoise import Tortoise

from devcamper.config import Settings
from devcamper.core.context import AppContext
from devcamper.core.db import build_tortoise_config
from devcamper.core.security import hash_password
from devcamper.main import create_app
from devcamper.models.user import User
from devcamper.services.geocoder import GeoResult


TEST_DB_URL = "sqlite://:memory:"

BOSTON = GeoResult(
    latitude=42.350846,
    longitude=-71.104028,
    formatted_address="233 Bay State Rd, Boston, MA 02215, US",
    street="233 Bay State Rd",
    city="Boston",
    state_code="MA",
    zipcode="02215",
    country_code="US",
)
LOWELL = GeoResult(
    latitude=42.646677,
    longitude=-71.324137,
    formatted_address="220 Pawtucket St, Lowell, MA 01854, US",
    street="220 Pawtucket St",
    city="Lowell",
    state_code="MA",
    zipcode="01854",
    country_code="US",
)
BURLINGTON = GeoResult(
    latitude=44.477058,
    longitude=-73.191826,
    formatted_address="85 S Prospect St, Burlington, VT 05405, US",
    street="85 S Prospect St",
    city="Burlington",
    state_code="VT",
    zipcode="05405",
    country_code="US",
)

# address / zipcode -> location served by FakeGeocoder
KNOWN_LOCATIONS = {
    "233 Bay State Rd Boston MA 02215": BOSTON,
    "02215": BOSTON,
    "220 Pawtucket St, Lowell, MA 01854": LOWELL,
    "01854": LOWELL,
    "85 South Prospect Street Burlington VT 05405": BURLINGTON,
}


class FakeMailer:
    """Collects messages instead of talking SMTP."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def is_available(self) -> bool:
        return True

    async def send(self, to: str, subject: str, text: str) -> None:
        if self.fail:
            raise ConnectionError("smtp down")
        self.sent.append({"to": to, "subject": subject, "text": text})


class FakeGeocoder:
    """Answers from KNOWN_LOCATIONS; unknown addresses have no match."""

    def __init__(self, locations=None):
        self.locations = dict(KNOWN_LOCATIONS if locations is None else locations)
        self.calls = []

    def is_available(self) -> bool:
        return True

    async def geocode(self, address: str):
        self.calls.append(address)
        result = self.locations.get(address)
        return [result] if result else []


async def _init_test_db() -> None:
    """
    Initialize a clean in-memory SQLite database for every test.
    Ensures tables are recreated from scratch.
    """
    if Tortoise._inited:
        await Tortoise.close_connections()
    await Tortoise.init(config=build_tortoise_config(TEST_DB_URL))
    await Tortoise.generate_schemas()


@pytest.fixture
def settings():
    return Settings(
        env="test",
        database_url=TEST_DB_URL,
        jwt_secret="test-secret",
        jwt_expire_minutes=60,
        admin_password=None,
        rate_limit="100/15 minutes",
        rate_limit_enabled=True,
        max_body_bytes=10 * 1024,
    )


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def geocoder():
    return FakeGeocoder()


@pytest.fixture
def ctx(settings, mailer, geocoder):
    return AppContext(settings=settings, mailer=mailer, geocoder=geocoder)


@pytest_asyncio.fixture
async def db():
    """A fresh in-memory database, without the HTTP client."""
    await _init_test_db()
    yield
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def client(ctx):
    """
    Provide an HTTPX AsyncClient bound to the FastAPI app with a fresh DB.
    """
    await _init_test_db()
    app = create_app(ctx)
    # Use ASGITransport without lifespan parameter (not supported in all httpx versions)
    try:
        transport = ASGITransport(app=app, lifespan="off")
    except TypeError:
        # Fallback for httpx versions that don't support lifespan parameter
        transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        yield async_client
    await Tortoise.close_connections()


@pytest_asyncio.fixture
async def create_user():
    """
    Factory fixture to create users of any role directly via ORM.
    """

    async def _create_user(role: str = "user", password: str = "UserPass!23", email: str | None = None):
        user = await User.create(
            name=f"{role} {uuid.uuid4().hex[:6]}",
            email=email or f"{role}_{uuid.uuid4().hex[:6]}@example.com",
            password_hash=hash_password(password),
            role=role,
        )
        return user, password

    return _create_user


@pytest_asyncio.fixture
async def auth_header_factory(client):
    """
    Helper fixture to obtain Authorization headers via the login endpoint.
    """

    async def _get_headers(email: str, password: str) -> dict[str, str]:
        resp = await client.post(
            "/api/v1/auth/login",
            json={"email": email, "password": password},
        )
        assert resp.status_code == 200, resp.text
        token = resp.json()["token"]
        return {"Authorization": f"Bearer {token}"}

    return _get_headers


@pytest_asyncio.fixture
async def login_as(create_user, auth_header_factory):
    """
    Create a user with the given role and return (user, auth headers).
    """

    async def _login_as(role: str = "user"):
        user, password = await create_user(role=role)
        headers = await auth_header_factory(user.email, password)
        return user, headers

    return _login_as
