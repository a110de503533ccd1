from sqlalchemy import Column, Integer, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from tripboard.core.database import Base
from datetime import datetime
import enum
import sqlalchemy as sa


class MemberRole(str, enum.Enum):
    VIEWER = "viewer"
    EDITOR = "editor"
    OWNER = "owner"


# Explicit rank table. A new role must be slotted in here, never compared by name.
ROLE_RANK = {
    MemberRole.VIEWER: 1,
    MemberRole.EDITOR: 2,
    MemberRole.OWNER: 3,
}

memberrole_enum = sa.Enum(
    MemberRole,
    name="memberrole",
    values_callable=lambda obj: [e.value for e in obj]  # stores lowercase values
)


class TripMember(Base):
    __tablename__ = "trip_members"

    id = Column(Integer, primary_key=True, index=True)

    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(memberrole_enum, nullable=False, default=MemberRole.VIEWER)

    joined_at = Column(DateTime, default=datetime.utcnow)

    # One membership per (trip, user)
    __table_args__ = (
        UniqueConstraint("trip_id", "user_id", name="uq_trip_user"),
    )

    trip = relationship("Trip", back_populates="members")
    user = relationship("User", back_populates="memberships")
