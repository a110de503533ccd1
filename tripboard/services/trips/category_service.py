from typing import List
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from tripboard.core.exceptions import ConflictError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.trips.category import Category
from tripboard.models.trips.trip_member import MemberRole
from tripboard.models.user.user import User
from tripboard.schemas.trip.category import CategoryCreate
from tripboard.services.access.access_control import ResourceRef, check_access

DEFAULT_CATEGORIES = [
    ("restaurant", "fork.knife", "#EA580C"),
    ("cafe", "cup.and.saucer.fill", "#A16207"),
    ("bar", "wineglass.fill", "#9333EA"),
    ("hotel", "bed.double.fill", "#2563EB"),
    ("museum", "building.columns.fill", "#7C3AED"),
    ("park", "leaf.fill", "#16A34A"),
    ("beach", "beach.umbrella.fill", "#06B6D4"),
    ("airport", "airplane", "#475569"),
    ("shopping", "bag.fill", "#DB2777"),
    ("nightlife", "moon.stars.fill", "#4F46E5"),
    ("landmark", "mappin.circle.fill", "#E11D48"),
    ("sports", "figure.run", "#059669"),
    ("entertainment", "theatermasks.fill", "#D97706"),
    ("transport", "tram.fill", "#0D9488"),
    ("health", "cross.case.fill", "#EF4444"),
    ("education", "graduationcap.fill", "#3B82F6"),
    ("worship", "building.fill", "#A8A29E"),
    ("other", "mappin", "#6B7280"),
]


async def seed_default_categories(db: AsyncSession) -> int:
    """Insert any missing global defaults. Safe to run on every startup."""
    result = await db.execute(
        select(Category.name).where(Category.is_default.is_(True), Category.trip_id.is_(None))
    )
    existing = set(result.scalars().all())

    missing = [entry for entry in DEFAULT_CATEGORIES if entry[0] not in existing]
    for name, icon, color in missing:
        db.add(Category(name=name, icon=icon, color=color, is_default=True))
    await db.commit()

    if missing:
        logger.info(f"Seeded {len(missing)} default categories")
    return len(missing)


async def get_trip_categories(db: AsyncSession, current_user: User, trip_id: int) -> List[Category]:
    """Global defaults followed by the trip's own categories."""
    await check_access(db, current_user.id, ResourceRef.trip(trip_id), MemberRole.VIEWER)

    result = await db.execute(
        select(Category)
        .where(or_(Category.trip_id.is_(None), Category.trip_id == trip_id))
        .order_by(Category.is_default.desc(), Category.name, Category.id)
    )
    return list(result.scalars().all())


async def create_category(
    db: AsyncSession,
    current_user: User,
    trip_id: int,
    data: CategoryCreate
) -> Category:
    await check_access(db, current_user.id, ResourceRef.trip(trip_id), MemberRole.EDITOR)

    duplicate = await db.scalar(
        select(Category.id).where(Category.trip_id == trip_id, Category.name == data.name)
    )
    if duplicate is not None:
        raise ConflictError("Category with this name already exists in this trip")

    category = Category(
        **data.model_dump(),
        is_default=False,
        trip_id=trip_id,
        created_by_id=current_user.id,
    )
    db.add(category)
    await db.commit()
    await db.refresh(category)

    logger.info(f"Category {category.id} created in trip {trip_id} by user {current_user.id}")
    return category


async def delete_category(db: AsyncSession, current_user: User, category_id: int) -> None:
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if category.is_default or category.trip_id is None:
        raise ValidationError("Default categories cannot be deleted")

    await check_access(db, current_user.id, ResourceRef.category(category_id), MemberRole.EDITOR)

    await db.delete(category)
    await db.commit()
    logger.info(f"Category {category_id} deleted by user {current_user.id}")


async def validate_category_for_trip(db: AsyncSession, category_id: int, trip_id: int) -> None:
    """An activity may use a global default or a category of its own trip."""
    category = await db.get(Category, category_id)
    if category is None:
        raise NotFoundError("Category not found")
    if category.trip_id is not None and category.trip_id != trip_id:
        raise ValidationError("Category does not belong to this trip")
