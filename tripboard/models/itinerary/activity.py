# tripboard/models/itinerary/activity.py

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, Float
from sqlalchemy.orm import relationship
from datetime import datetime
from tripboard.core.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    # NULL day_id puts the activity in the trip's unscheduled pool
    day_id = Column(Integer, ForeignKey("itinerary_days.id", ondelete="CASCADE"), nullable=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    order_index = Column(Float, nullable=False, default=0)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)
    start_time = Column(String, nullable=True)
    place_id = Column(Integer, ForeignKey("places.id", ondelete="SET NULL"), nullable=True, index=True)
    google_place_id = Column(String, nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    trip = relationship("Trip", back_populates="activities")
    day = relationship("Day", back_populates="activities")
    place = relationship("Place")
    category = relationship("Category")
    comments = relationship("Comment", back_populates="activity", cascade="all, delete-orphan")

    def to_dict(self):
        return {
            "id": self.id,
            "trip_id": self.trip_id,
            "day_id": self.day_id,
            "title": self.title,
            "description": self.description,
            "order_index": self.order_index,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "address": self.address,
            "start_time": self.start_time,
            "place_id": self.place_id,
            "google_place_id": self.google_place_id,
            "category_id": self.category_id,
            "created_by_id": self.created_by_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
