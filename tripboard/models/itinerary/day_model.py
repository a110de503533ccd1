from sqlalchemy import Column, Integer, String, ForeignKey, Date, Float
from sqlalchemy.orm import relationship
from tripboard.core.database import Base


class Day(Base):
    """One itinerary day. Days are ordered within their trip by ``order_index``."""
    __tablename__ = "itinerary_days"

    id = Column(Integer, primary_key=True, index=True)
    trip_id = Column(Integer, ForeignKey("trips.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    date = Column(Date, nullable=True)
    order_index = Column(Float, nullable=False, default=0)

    trip = relationship("Trip", back_populates="days")
    activities = relationship("Activity", back_populates="day", cascade="all, delete")

    def to_dict(self):
        return {
            "id": self.id,
            "trip_id": self.trip_id,
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "order_index": self.order_index,
        }
