# devcamper/seeder.py
"""
Load or wipe the bundled sample data.

    python -m devcamper.seeder -i      import users, bootcamps, courses, reviews
    python -m devcamper.seeder -d      delete every record

The fixtures live in devcamper/_data/*.json (override with --data-dir).
Records keep their fixture ids so that the cross references resolve.
Plain passwords in users.json are hashed on import. Bootcamp locations are
taken from the fixtures, not geocoded.
"""
import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

from tortoise.transactions import in_transaction

from devcamper.config import Settings
from devcamper.core.db import close_db, init_db
from devcamper.core.security import hash_password
from devcamper.models import Bootcamp, Course, Review, User
from devcamper.schemas.bootcamp import BootcampCreateIn
from devcamper.schemas.course import CourseCreateIn
from devcamper.schemas.review import ReviewCreateIn
from devcamper.services.aggregates import recompute_average_cost, recompute_average_rating
from devcamper.services.bootcamps import slugify

logger = logging.getLogger("uvicorn.error")

DATA_DIR = Path(__file__).resolve().parent / "_data"


def load_fixture(data_dir: Path, name: str) -> list:
    with open(data_dir / f"{name}.json", encoding="utf-8") as fh:
        return json.load(fh)


def _location(raw: Optional[dict]) -> dict:
    raw = raw or {}
    lng, lat = (raw.get("coordinates") or [None, None])[:2]
    return {
        "location_lng": lng,
        "location_lat": lat,
        "formatted_address": raw.get("formattedAddress"),
        "street": raw.get("street"),
        "city": raw.get("city"),
        "state": raw.get("state"),
        "zipcode": raw.get("zipcode"),
        "country": raw.get("country"),
    }


async def import_data(data_dir: Path = DATA_DIR) -> dict:
    """
    Insert all fixtures in one transaction and recompute the aggregates of
    every seeded bootcamp.

    Returns:
        dict: number of records created per resource
    """
    users = load_fixture(data_dir, "users")
    bootcamps = load_fixture(data_dir, "bootcamps")
    courses = load_fixture(data_dir, "courses")
    reviews = load_fixture(data_dir, "reviews")

    async with in_transaction():
        for u in users:
            await User.create(
                id=u["id"],
                name=u["name"],
                email=u["email"].lower(),
                role=u.get("role", "user"),
                password_hash=hash_password(u["password"]),
            )
        for b in bootcamps:
            body = BootcampCreateIn.model_validate(b)
            await Bootcamp.create(
                id=b["id"],
                user_id=b["user"],
                slug=slugify(body.name),
                **body.model_dump(),
                **_location(b.get("location")),
            )
        for c in courses:
            body = CourseCreateIn.model_validate(c)
            await Course.create(id=c["id"], bootcamp_id=c["bootcamp"], user_id=c["user"], **body.model_dump())
        for r in reviews:
            body = ReviewCreateIn.model_validate(r)
            await Review.create(id=r["id"], bootcamp_id=r["bootcamp"], user_id=r["user"], **body.model_dump())

    for b in bootcamps:
        await recompute_average_cost(b["id"])
        await recompute_average_rating(b["id"])

    counts = {
        "users": len(users),
        "bootcamps": len(bootcamps),
        "courses": len(courses),
        "reviews": len(reviews),
    }
    logger.info("[seeder] data imported %s", counts)
    return counts


async def destroy_data() -> None:
    """Delete every review, course, bootcamp and user."""
    async with in_transaction():
        await Review.all().delete()
        await Course.all().delete()
        await Bootcamp.all().delete()
        await User.all().delete()
    logger.info("[seeder] data destroyed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="python -m devcamper.seeder", description=__doc__.split("\n\n")[0])
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("-i", "--import", dest="action", action="store_const", const="import",
                        help="import the sample data")
    action.add_argument("-d", "--delete", dest="action", action="store_const", const="delete",
                        help="delete all data")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="directory holding the JSON fixtures")
    return parser


async def run(action: str, data_dir: Path, settings: Settings) -> None:
    await init_db(settings.database_url)
    try:
        if action == "import":
            await import_data(data_dir)
        else:
            await destroy_data()
    finally:
        await close_db()


def main(argv: Optional[Sequence[str]] = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = build_parser().parse_args(argv)
    asyncio.run(run(args.action, args.data_dir, Settings()))


if __name__ == "__main__":
    main()
