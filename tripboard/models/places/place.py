from sqlalchemy import Column, Integer, String, Float, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from tripboard.core.database import Base


class Place(Base):
    """Canonical location shared by every activity, check-in and review that points at it."""
    __tablename__ = "places"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    address = Column(String, nullable=True)
    external_id = Column(String, nullable=True)
    provider = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("external_id", "provider", name="uq_place_external"),
    )

    check_ins = relationship("CheckIn", back_populates="place")
    reviews = relationship("Review", back_populates="place")
