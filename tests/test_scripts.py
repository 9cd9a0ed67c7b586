import pytest
from pydantic import SecretStr
from sqlalchemy import select
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.config import settings
from app.models import Base
from app.models.category import Category
from app.models.enums import CategoryType, ListingType
from app.models.listing import Listing
from app.scripts import create_coupon, create_products, seed_categories, update_listing_types
from app.services.catalog import DEFAULT_CATEGORY_SEEDS


@pytest.fixture
async def file_db(tmp_path):
    # scripts open their own engine, so the schema must live in a file
    url = f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}"
    engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield url, async_sessionmaker(engine, expire_on_commit=False)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_seed_script_seeds_and_reclassifies(file_db):
    url, Session = file_db

    async with Session() as db:
        db.add(Category(id="cat_dj", name="DJ", type=CategoryType.SPACE))
        db.add(Category(id="cat_ch", name="Chácara", type=CategoryType.SPACE))
        await db.flush()
        db.add(Listing(id="lst_dj", title="DJ Marcos", category_id="cat_dj", type=ListingType.SPACE))
        db.add(Listing(id="lst_ch", title="Chácara Sol", category_id="cat_ch", type=ListingType.SERVICE))
        await db.commit()

    seeded, reclassified = await seed_categories.run(reclassify=True, database_url=url)

    assert seeded.updated == 2
    assert seeded.created == len(DEFAULT_CATEGORY_SEEDS) - 2
    assert (reclassified.services, reclassified.spaces) == (1, 1)

    async with Session() as db:
        types = dict((await db.execute(select(Listing.id, Listing.type))).all())
        dj = (await db.execute(select(Category.type).where(Category.name == "DJ"))).scalar_one()
    assert types == {"lst_dj": ListingType.SERVICE, "lst_ch": ListingType.SPACE}
    assert dj == CategoryType.SERVICE


@pytest.mark.asyncio
async def test_update_listing_types_uses_configured_names(file_db, monkeypatch):
    url, Session = file_db
    monkeypatch.setattr(settings, "service_category_names", ["Chácara"])

    async with Session() as db:
        db.add(Category(id="cat_ch", name="Chácara", type=CategoryType.SPACE))
        await db.flush()
        db.add(Listing(id="lst_ch", title="Chácara Sol", category_id="cat_ch"))
        await db.commit()

    summary = await update_listing_types.run(database_url=url)
    assert (summary.services, summary.spaces) == (1, 0)


def test_create_coupon_refuses_without_secret_key(monkeypatch, capsys):
    monkeypatch.setattr(settings, "stripe_secret_key", None)

    assert create_coupon.main([]) == 2
    assert "STRIPE_SECRET_KEY" in capsys.readouterr().err


def test_create_coupon_rejects_invalid_arguments(monkeypatch, capsys):
    monkeypatch.setattr(settings, "stripe_secret_key", SecretStr("sk_test_123"))

    assert create_coupon.main(["--duration", "repeating"]) == 2
    assert "duration_in_months" in capsys.readouterr().err


def test_create_coupon_defaults():
    args = create_coupon.parse_args([])
    assert args.code == "DESCONTO50"
    assert args.percent_off == 50
    assert args.duration == "once"


def test_create_products_refuses_without_secret_key(monkeypatch):
    monkeypatch.setattr(settings, "stripe_secret_key", None)
    assert create_products.main() == 2


@pytest.fixture
def empty_db_url(tmp_path):
    # a database without the catalog tables: every statement fails
    return f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"


@pytest.mark.asyncio
async def test_seed_script_run_surfaces_store_errors(empty_db_url):
    with pytest.raises(OperationalError):
        await seed_categories.run(database_url=empty_db_url)


@pytest.mark.asyncio
async def test_update_listing_types_run_surfaces_store_errors(empty_db_url):
    with pytest.raises(OperationalError):
        await update_listing_types.run(database_url=empty_db_url)


def test_seed_script_main_does_not_swallow_store_errors(empty_db_url, monkeypatch):
    monkeypatch.setattr(settings, "database_url", empty_db_url)
    monkeypatch.setattr("sys.argv", ["seed_categories"])

    with pytest.raises(OperationalError):
        seed_categories.main()


def test_update_listing_types_main_does_not_swallow_store_errors(empty_db_url, monkeypatch):
    monkeypatch.setattr(settings, "database_url", empty_db_url)

    with pytest.raises(OperationalError):
        update_listing_types.main()


def test_create_coupon_refuses_blank_secret_key(monkeypatch, capsys):
    monkeypatch.setattr(settings, "stripe_secret_key", SecretStr(""))

    assert create_coupon.main([]) == 2
    assert "STRIPE_SECRET_KEY" in capsys.readouterr().err


def test_create_products_refuses_blank_secret_key(monkeypatch):
    monkeypatch.setattr(settings, "stripe_secret_key", SecretStr(""))
    assert create_products.main() == 2
