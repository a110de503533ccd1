"""
Trip-rooted access control.

No nested resource carries its own ACL: days, activities, comments,
categories and todos all inherit authorization from the membership table of the trip that owns them.
``check_access`` walks the parent links up to that trip and compares the
caller's role against the required minimum using ``ROLE_RANK``.
"""
import enum
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from tripboard.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tripboard.core.logger import logger
from tripboard.models.itinerary.activity import Activity
from tripboard.models.itinerary.comment import Comment
from tripboard.models.itinerary.day_model import Day
from tripboard.models.trips.category import Category
from tripboard.models.trips.todo import Todo
from tripboard.models.trips.trip_member import ROLE_RANK, MemberRole, TripMember
from tripboard.models.trips.trip_model import Trip


class ResourceKind(str, enum.Enum):
    TRIP = "trip"
    DAY = "day"
    ACTIVITY = "activity"
    COMMENT = "comment"
    CATEGORY = "category"
    TODO = "todo"


@dataclass(frozen=True)
class ResourceRef:
    kind: ResourceKind
    id: int

    @classmethod
    def trip(cls, trip_id: int) -> "ResourceRef":
        return cls(ResourceKind.TRIP, trip_id)

    @classmethod
    def day(cls, day_id: int) -> "ResourceRef":
        return cls(ResourceKind.DAY, day_id)

    @classmethod
    def activity(cls, activity_id: int) -> "ResourceRef":
        return cls(ResourceKind.ACTIVITY, activity_id)

    @classmethod
    def comment(cls, comment_id: int) -> "ResourceRef":
        return cls(ResourceKind.COMMENT, comment_id)

    @classmethod
    def category(cls, category_id: int) -> "ResourceRef":
        return cls(ResourceKind.CATEGORY, category_id)

    @classmethod
    def todo(cls, todo_id: int) -> "ResourceRef":
        return cls(ResourceKind.TODO, todo_id)


def parse_role(role: Union[str, MemberRole]) -> MemberRole:
    if isinstance(role, MemberRole):
        return role
    try:
        return MemberRole(role)
    except ValueError:
        raise ValidationError(f"Unknown role: {role!r}") from None


def role_rank(role: Union[str, MemberRole]) -> int:
    return ROLE_RANK[parse_role(role)]


def has_min_role(role: Union[str, MemberRole], min_role: Union[str, MemberRole]) -> bool:
    """The one comparison every permission check goes through."""
    return role_rank(role) >= role_rank(min_role)


async def _trip_of_trip(db: AsyncSession, trip_id: int) -> Optional[int]:
    result = await db.execute(select(Trip.id).where(Trip.id == trip_id))
    return result.scalar_one_or_none()


async def _trip_of_day(db: AsyncSession, day_id: int) -> Optional[int]:
    result = await db.execute(select(Day.trip_id).where(Day.id == day_id))
    return result.scalar_one_or_none()


async def _trip_of_activity(db: AsyncSession, activity_id: int) -> Optional[int]:
    result = await db.execute(select(Activity.trip_id).where(Activity.id == activity_id))
    return result.scalar_one_or_none()


async def _trip_of_comment(db: AsyncSession, comment_id: int) -> Optional[int]:
    # Comment -> Activity -> Trip
    result = await db.execute(
        select(Activity.trip_id)
        .join(Comment, Comment.activity_id == Activity.id)
        .where(Comment.id == comment_id)
    )
    return result.scalar_one_or_none()


async def _trip_of_category(db: AsyncSession, category_id: int) -> Optional[int]:
    # Global defaults have no trip and therefore no owner to check against.
    result = await db.execute(select(Category.trip_id).where(Category.id == category_id))
    return result.scalar_one_or_none()


async def _trip_of_todo(db: AsyncSession, todo_id: int) -> Optional[int]:
    result = await db.execute(select(Todo.trip_id).where(Todo.id == todo_id))
    return result.scalar_one_or_none()


_OWNING_TRIP_LOOKUPS: Dict[ResourceKind, Callable[[AsyncSession, int], Awaitable[Optional[int]]]] = {
    ResourceKind.TRIP: _trip_of_trip,
    ResourceKind.DAY: _trip_of_day,
    ResourceKind.ACTIVITY: _trip_of_activity,
    ResourceKind.COMMENT: _trip_of_comment,
    ResourceKind.CATEGORY: _trip_of_category,
    ResourceKind.TODO: _trip_of_todo,
}


async def resolve_owning_trip(db: AsyncSession, ref: ResourceRef) -> int:
    """Follow parent links from ``ref`` to the id of the trip that owns it."""
    lookup = _OWNING_TRIP_LOOKUPS.get(ref.kind)
    if lookup is None:
        raise ValidationError(f"Unsupported resource kind: {ref.kind!r}")

    trip_id = await lookup(db, ref.id)
    if trip_id is None:
        raise NotFoundError(f"{ref.kind.value.capitalize()} not found")
    return trip_id


async def get_membership(db: AsyncSession, trip_id: int, user_id: int) -> Optional[TripMember]:
    result = await db.execute(
        select(TripMember).where(
            TripMember.trip_id == trip_id,
            TripMember.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def check_access(
    db: AsyncSession,
    user_id: int,
    ref: ResourceRef,
    min_role: Union[str, MemberRole] = MemberRole.VIEWER,
) -> TripMember:
    """
    Return the caller's membership in the trip owning ``ref``.

    Raises ``NotFoundError`` when the resource (or its trip) does not exist and
    ``ForbiddenError`` when the caller is not a member or ranks below
    ``min_role``.
    """
    min_role = parse_role(min_role)
    trip_id = await resolve_owning_trip(db, ref)

    member = await get_membership(db, trip_id, user_id)
    if member is None:
        logger.warning(f"User {user_id} denied on {ref.kind.value} {ref.id}: not a member of trip {trip_id}")
        raise ForbiddenError("Not a member of this trip")

    if not has_min_role(member.role, min_role):
        logger.warning(
            f"User {user_id} denied on {ref.kind.value} {ref.id}: "
            f"role {member.role.value} below {min_role.value}"
        )
        raise ForbiddenError("Insufficient permissions")

    return member


async def get_public_trip(db: AsyncSession, trip_id: int) -> Trip:
    """
    Load a trip for anonymous reading.

    Private trips are reported as missing so their existence is not leaked.
    """
    trip = await db.get(Trip, trip_id)
    if trip is None or not trip.is_public:
        raise NotFoundError("Trip not found")
    return trip
