from sqlalchemy import Column, Integer, String, Date, ForeignKey, DateTime, Text, Boolean, func
from sqlalchemy.orm import relationship
from tripboard.core.database import Base


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)

    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    owner = relationship("User", back_populates="owned_trips")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("TripMember", back_populates="trip", cascade="all, delete-orphan")
    invites = relationship("TripInvite", back_populates="trip", cascade="all, delete-orphan")
    days = relationship("Day", back_populates="trip", cascade="all, delete-orphan")
    activities = relationship("Activity", back_populates="trip", cascade="all, delete-orphan")
    categories = relationship("Category", back_populates="trip", cascade="all, delete-orphan")
    todos = relationship("Todo", back_populates="trip", cascade="all, delete-orphan")
