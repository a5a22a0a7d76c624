import pytest

from devcamper.core.bootstrap import ensure_default_admin
from devcamper.models import Bootcamp, Course, Review, User
from devcamper.seeder import build_parser, destroy_data, import_data


pytestmark = pytest.mark.asyncio


async def test_healthz(client):
    resp = await client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


async def test_unknown_route_uses_failure_envelope(client):
    resp = await client.get("/api/v1/nothing-here")
    assert resp.status_code == 404
    assert resp.json()["success"] is False


async def test_seeder_import_and_destroy(db):
    counts = await import_data()
    assert counts == {"users": 5, "bootcamps": 3, "courses": 4, "reviews": 3}
    assert await User.all().count() == 5

    devworks = await Bootcamp.get(slug="devworks-bootcamp")
    assert devworks.average_cost == 9000
    assert devworks.average_rating == 9
    assert devworks.has_location

    codemasters = await Bootcamp.get(slug="codemasters")
    assert codemasters.average_cost == 12000
    assert codemasters.average_rating is None

    await destroy_data()
    for model in (Review, Course, Bootcamp, User):
        assert await model.all().count() == 0


async def test_seeded_users_can_log_in(client):
    await import_data()
    resp = await client.post("/api/v1/auth/login", json={"email": "publisher@gmail.com", "password": "123456"})
    assert resp.status_code == 200


async def test_seeder_arguments():
    parser = build_parser()
    assert parser.parse_args(["-i"]).action == "import"
    assert parser.parse_args(["-d"]).action == "delete"
    with pytest.raises(SystemExit):
        parser.parse_args([])


async def test_default_admin_bootstrap(db, settings):
    settings.admin_password = "BootPass#1"
    admin = await ensure_default_admin(settings)
    assert admin is not None
    assert admin.role == "admin"

    # Only once
    assert await ensure_default_admin(settings) is None
    assert await User.filter(role="admin").count() == 1


async def test_default_admin_needs_password(db, settings):
    assert await ensure_default_admin(settings) is None
    assert await User.all().count() == 0
