from sqlalchemy import Integer, Column, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from tripboard.core.database import Base
from tripboard.models.trips.trip_member import MemberRole, memberrole_enum
from datetime import datetime
import enum
import sqlalchemy as sa


class InviteStatus(str, enum.Enum):
    pending = "pending"
    accepted = "accepted"
    rejected = "rejected"


class TripInvite(Base):
    __tablename__ = "trip_invites"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False)
    invited_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    invited_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role = Column(memberrole_enum, nullable=False, default=MemberRole.VIEWER)
    status = Column(sa.Enum(InviteStatus, name="invitestatus"), nullable=False, default=InviteStatus.pending)
    created_at = Column(DateTime, default=datetime.utcnow)
    responded_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("trip_id", "invited_user_id", name="uq_trip_invited_user"),
    )

    trip = relationship("Trip", back_populates="invites")
    invited_user = relationship("User", foreign_keys=[invited_user_id])
    invited_by = relationship("User", foreign_keys=[invited_by_id])
