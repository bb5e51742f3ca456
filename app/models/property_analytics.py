from sqlalchemy import Column, Date, Integer, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
import uuid
from app.core.database import Base


class PropertyAnalytics(Base):
    """Per-day engagement counters of a property"""
    __tablename__ = "property_analytics"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)
    property_id = Column(Uuid, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)

    views = Column(Integer, default=0, nullable=False)
    favorites = Column(Integer, default=0, nullable=False)
    unfavorites = Column(Integer, default=0, nullable=False)
    contacts = Column(Integer, default=0, nullable=False)

    listing = relationship("Property", backref="analytics")

    # One row per property per day
    __table_args__ = (
        UniqueConstraint('property_id', 'date', name='uq_property_analytics_day'),
    )

    def __repr__(self):
        return f"<PropertyAnalytics {self.property_id} {self.date} v={self.views} f={self.favorites}>"

    @property
    def net_favorites(self) -> int:
        return (self.favorites or 0) - (self.unfavorites or 0)
