from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from tripboard.core.database import get_db
from tripboard.dependencies.auth import get_current_user
from tripboard.models.trips.trip_member import MemberRole, TripMember
from tripboard.models.user.user import User
from tripboard.services.access.access_control import ResourceRef, check_access, parse_role


def require_trip_access(min_role: str):
    """Route guard for paths carrying ``trip_id``; yields the caller's membership."""
    required = parse_role(min_role)

    async def trip_access_checker(
        trip_id: int,
        db: AsyncSession = Depends(get_db),
        current_user: User = Depends(get_current_user)
    ) -> TripMember:
        return await check_access(db, current_user.id, ResourceRef.trip(trip_id), required)

    return trip_access_checker


require_viewer = require_trip_access(MemberRole.VIEWER.value)
require_editor = require_trip_access(MemberRole.EDITOR.value)
require_owner = require_trip_access(MemberRole.OWNER.value)
