from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.models.category import Category
from app.models.enums import CategoryType, ListingType
from app.models.listing import Listing


log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CategorySeed:
    name: str
    type: CategoryType


@dataclass(frozen=True)
class SeedSummary:
    created: int
    updated: int


@dataclass(frozen=True)
class ReclassifySummary:
    services: int
    spaces: int


DEFAULT_CATEGORY_SEEDS: tuple[CategorySeed, ...] = (
    # Spaces
    CategorySeed("Chácara", CategoryType.SPACE),
    CategorySeed("Sítio", CategoryType.SPACE),
    CategorySeed("Salão de Festas", CategoryType.SPACE),
    CategorySeed("Área de Lazer", CategoryType.SPACE),
    CategorySeed("Rancho", CategoryType.SPACE),
    # Services
    CategorySeed("DJ", CategoryType.SERVICE),
    CategorySeed("Buffet", CategoryType.SERVICE),
    CategorySeed("Segurança", CategoryType.SERVICE),
    CategorySeed("Fotógrafo", CategoryType.SERVICE),
    CategorySeed("Animação", CategoryType.SERVICE),
    CategorySeed("Bartender", CategoryType.SERVICE),
    CategorySeed("Decoração", CategoryType.SERVICE),
    CategorySeed("Som", CategoryType.SERVICE),
    CategorySeed("Iluminação", CategoryType.SERVICE),
    # legacy combined category, still referenced by older listings
    CategorySeed("Som e Iluminação", CategoryType.SERVICE),
    # Equipment
    CategorySeed("Mesas e Cadeiras", CategoryType.EQUIPMENT),
    CategorySeed("Brinquedos e Infláveis", CategoryType.EQUIPMENT),
    CategorySeed("Tendas e Coberturas", CategoryType.EQUIPMENT),
    CategorySeed("Geradores", CategoryType.EQUIPMENT),
    CategorySeed("Palco e Estrutura", CategoryType.EQUIPMENT),
    CategorySeed("Telões e Projetores", CategoryType.EQUIPMENT),
)


def parse_category_type(value: str | CategoryType) -> CategoryType:
    if isinstance(value, CategoryType):
        return value
    try:
        return CategoryType(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(t.value for t in CategoryType)
        raise ValueError(f"Unknown category type {value!r} (expected one of: {allowed})") from None


def _validate_seeds(seeds: Iterable[CategorySeed]) -> list[CategorySeed]:
    out: list[CategorySeed] = []
    seen: set[str] = set()
    for seed in seeds:
        name = (seed.name or "").strip()
        if not name:
            raise ValueError("Category seed with empty name")
        if name in seen:
            raise ValueError(f"Duplicate category seed: {name!r}")
        seen.add(name)
        out.append(CategorySeed(name=name, type=parse_category_type(seed.type)))
    return out


def default_service_names() -> frozenset[str]:
    return frozenset(s.name for s in DEFAULT_CATEGORY_SEEDS if s.type is CategoryType.SERVICE)


def resolve_service_names(settings: Settings) -> frozenset[str]:
    if settings.service_category_names is not None:
        return frozenset(n.strip() for n in settings.service_category_names if n.strip())
    return default_service_names()


async def seed_categories(
    db: AsyncSession,
    seeds: Iterable[CategorySeed] = DEFAULT_CATEGORY_SEEDS,
    *,
    actor: str = "seed",
) -> SeedSummary:
    """
    Create-or-update every seeded category by name.

    Each category is committed on its own: a crash mid-run leaves the store
    partially seeded, and re-running converges to the same end state.
    """
    validated = _validate_seeds(seeds)
    created = updated = 0

    for seed in validated:
        existing = (await db.execute(select(Category).where(Category.name == seed.name))).scalar_one_or_none()
        if existing is None:
            log.info("Creating category: %s (%s)", seed.name, seed.type.value)
            db.add(Category(name=seed.name, type=seed.type, created_by=actor, updated_by=actor))
            created += 1
        else:
            log.info("Updating category: %s (%s)", seed.name, seed.type.value)
            existing.type = seed.type
            existing.updated_by = actor
            updated += 1
        await db.commit()

    return SeedSummary(created=created, updated=updated)


async def reclassify_listings(
    db: AsyncSession,
    service_names: Iterable[str],
    *,
    actor: str = "seed",
) -> ReclassifySummary:
    """
    Recompute Listing.type from category-name membership.

    The two UPDATEs use complementary predicates on the same subquery, so
    every listing gets exactly one assignment.
    """
    names = sorted({n.strip() for n in service_names if n and n.strip()})
    service_category_ids = select(Category.id).where(Category.name.in_(names))

    services = await db.execute(
        update(Listing)
        .where(Listing.category_id.in_(service_category_ids))
        .values(type=ListingType.SERVICE, updated_by=actor)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    log.info("Updated %d listings to %s", services.rowcount, ListingType.SERVICE.value)

    spaces = await db.execute(
        update(Listing)
        .where(Listing.category_id.not_in(service_category_ids))
        .values(type=ListingType.SPACE, updated_by=actor)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    log.info("Updated %d listings to %s", spaces.rowcount, ListingType.SPACE.value)

    return ReclassifySummary(services=services.rowcount, spaces=spaces.rowcount)


async def clean_category_names(db: AsyncSession, *, actor: str = "seed") -> int:
    """
    Trim surrounding whitespace from stored category names.

    All renames share one commit. If a trimmed name collides with another
    stored category (e.g. "DJ " next to "DJ"), the clash is logged and the
    commit raises IntegrityError, so nothing is renamed.
    """
    categories = (await db.execute(select(Category))).scalars().all()
    stored_names = {cat.name for cat in categories}

    renamed = 0
    for cat in categories:
        trimmed = cat.name.strip()
        if trimmed != cat.name:
            if trimmed in stored_names:
                log.error("Category %r clashes with existing %r after trimming", cat.name, trimmed)
            log.info("Renaming category %r to %r", cat.name, trimmed)
            cat.name = trimmed
            cat.updated_by = actor
            renamed += 1
    await db.commit()
    return renamed


async def list_categories(db: AsyncSession) -> list[Category]:
    return list((await db.execute(select(Category).order_by(Category.name))).scalars().all())
