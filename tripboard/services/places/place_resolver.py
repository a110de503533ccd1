"""
Best-effort place deduplication.

Matches a location reference against existing canonical places, first by
provider id and then by name plus a small coordinate window, and creates a
new place when nothing matches. Near-duplicate names or references straddling
the window stay separate places; consumers must work from the returned id
and never assume two references were merged.
"""
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tripboard.core.config import settings
from tripboard.core.exceptions import PlaceResolutionError
from tripboard.core.logger import logger
from tripboard.models.places.place import Place


async def _find_by_external_id(db: AsyncSession, external_id: str, provider: str) -> Optional[Place]:
    result = await db.execute(
        select(Place).where(
            Place.external_id == external_id,
            Place.provider == provider
        )
    )
    return result.scalar_one_or_none()


async def _find_nearby(db: AsyncSession, name: str, lat: float, lng: float) -> Optional[Place]:
    window = settings.PLACE_PROXIMITY_DEGREES
    result = await db.execute(
        select(Place)
        .where(
            Place.name == name,
            func.abs(Place.latitude - lat) < window,
            func.abs(Place.longitude - lng) < window
        )
        .order_by(Place.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def find_or_create_place(
    db: AsyncSession,
    name: str,
    lat: float,
    lng: float,
    address: Optional[str] = None,
    external_id: Optional[str] = None,
    provider: Optional[str] = None,
) -> Place:
    """
    Return the canonical place for a location reference, creating it if needed.

    Matching order:
      1. exact ``(external_id, provider)`` when both are given
      2. exact ``name`` with both coordinates inside the proximity window
      3. otherwise a new place row

    Storage failures are raised as ``PlaceResolutionError``; a miss is not an
    error, it just creates a place.
    """
    has_external = bool(external_id) and bool(provider)

    try:
        if has_external:
            existing = await _find_by_external_id(db, external_id, provider)
            if existing:
                return existing

        nearby = await _find_nearby(db, name, lat, lng)
        if nearby:
            logger.info(f"Place '{name}' matched existing place {nearby.id} by proximity")
            return nearby

        place = Place(
            name=name,
            latitude=lat,
            longitude=lng,
            address=address,
            external_id=external_id if has_external else None,
            provider=provider if has_external else None,
        )
        try:
            async with db.begin_nested():
                db.add(place)
        except IntegrityError:
            # Lost a race against another request creating the same provider place
            if not has_external:
                raise
            existing = await _find_by_external_id(db, external_id, provider)
            if existing is None:
                raise
            return existing

        logger.info(f"Created place {place.id} '{name}'")
        return place

    except SQLAlchemyError as exc:
        logger.error(f"Place resolution failed for '{name}': {exc}")
        raise PlaceResolutionError() from exc


async def resolve_place(
    db: AsyncSession,
    name: str,
    lat: float,
    lng: float,
    address: Optional[str] = None,
    external_id: Optional[str] = None,
    provider: Optional[str] = None,
) -> int:
    place = await find_or_create_place(db, name, lat, lng, address, external_id, provider)
    return place.id
