import pytest

from conftest import make_activity, make_day
from tripboard.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from tripboard.models.itinerary.comment import Comment
from tripboard.models.trips.category import Category
from tripboard.models.trips.todo import Todo
from tripboard.models.trips.trip_member import MemberRole
from tripboard.services.access.access_control import (
    ResourceRef,
    check_access,
    get_public_trip,
    has_min_role,
    parse_role,
    resolve_owning_trip,
)


@pytest.mark.parametrize(
    "role, min_role, allowed",
    [
        ("viewer", "viewer", True),
        ("viewer", "editor", False),
        ("viewer", "owner", False),
        ("editor", "viewer", True),
        ("editor", "editor", True),
        ("editor", "owner", False),
        ("owner", "viewer", True),
        ("owner", "editor", True),
        ("owner", "owner", True),
    ],
)
def test_role_hierarchy(role, min_role, allowed):
    assert has_min_role(role, min_role) is allowed


def test_unknown_role_is_a_validation_error():
    with pytest.raises(ValidationError):
        parse_role("admin")


def test_parse_role_accepts_enum_members():
    assert parse_role(MemberRole.EDITOR) is MemberRole.EDITOR


async def test_member_passes_with_sufficient_role(db, trip, viewer, editor, owner):
    member = await check_access(db, viewer.id, ResourceRef.trip(trip.id), MemberRole.VIEWER)
    assert member.role == MemberRole.VIEWER

    member = await check_access(db, editor.id, ResourceRef.trip(trip.id), MemberRole.EDITOR)
    assert member.role == MemberRole.EDITOR

    member = await check_access(db, owner.id, ResourceRef.trip(trip.id), MemberRole.OWNER)
    assert member.role == MemberRole.OWNER


async def test_insufficient_role_is_forbidden(db, trip, viewer, editor):
    with pytest.raises(ForbiddenError) as exc:
        await check_access(db, viewer.id, ResourceRef.trip(trip.id), MemberRole.EDITOR)
    assert exc.value.detail == "Insufficient permissions"

    with pytest.raises(ForbiddenError):
        await check_access(db, editor.id, ResourceRef.trip(trip.id), MemberRole.OWNER)


async def test_non_member_is_forbidden(db, trip, outsider):
    with pytest.raises(ForbiddenError) as exc:
        await check_access(db, outsider.id, ResourceRef.trip(trip.id))
    assert exc.value.detail == "Not a member of this trip"


async def test_missing_resource_is_not_found_not_forbidden(db, outsider):
    with pytest.raises(NotFoundError):
        await check_access(db, outsider.id, ResourceRef.trip(424242))
    with pytest.raises(NotFoundError):
        await check_access(db, outsider.id, ResourceRef.activity(424242))


async def test_nested_resources_resolve_to_their_trip(db, trip, editor, viewer):
    day = await make_day(db, editor, trip.id)
    activity = await make_activity(db, editor, trip.id, "Senso-ji", day_id=day.id)
    comment = Comment(activity_id=activity.id, user_id=viewer.id, content="Go early")
    db.add(comment)
    await db.commit()

    assert await resolve_owning_trip(db, ResourceRef.day(day.id)) == trip.id
    assert await resolve_owning_trip(db, ResourceRef.activity(activity.id)) == trip.id
    assert await resolve_owning_trip(db, ResourceRef.comment(comment.id)) == trip.id


async def test_trip_scoped_categories_and_todos_resolve_to_their_trip(db, trip):
    category = Category(name="onsen", icon="drop.fill", color="#0EA5E9", trip_id=trip.id)
    default = Category(name="other", icon="mappin", color="#6B7280", is_default=True)
    todo = Todo(trip_id=trip.id, title="Book ryokan")
    db.add_all([category, default, todo])
    await db.commit()

    assert await resolve_owning_trip(db, ResourceRef.category(category.id)) == trip.id
    assert await resolve_owning_trip(db, ResourceRef.todo(todo.id)) == trip.id
    with pytest.raises(NotFoundError):
        await resolve_owning_trip(db, ResourceRef.category(default.id))


async def test_public_trip_lookup_hides_private_trips(db, trip):
    with pytest.raises(NotFoundError):
        await get_public_trip(db, trip.id)

    trip.is_public = True
    await db.commit()

    assert (await get_public_trip(db, trip.id)).id == trip.id


async def test_comment_access_is_decided_by_the_trip(db, trip, editor, outsider):
    activity = await make_activity(db, editor, trip.id, "Shibuya")
    comment = Comment(activity_id=activity.id, user_id=editor.id, content="Crossing at night")
    db.add(comment)
    await db.commit()

    member = await check_access(db, editor.id, ResourceRef.comment(comment.id))
    assert member.trip_id == trip.id

    with pytest.raises(ForbiddenError):
        await check_access(db, outsider.id, ResourceRef.comment(comment.id))
