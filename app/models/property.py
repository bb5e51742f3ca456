from sqlalchemy import Column, String, DateTime, Integer, Float, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
import enum
from app.core.database import Base
from app.models.enums import value_enum


class PropertyType(str, enum.Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    LAND = "land"
    COMMERCIAL = "commercial"


class PropertyStatus(str, enum.Enum):
    ACTIVE = "active"
    PENDING = "pending"
    SOLD = "sold"
    RENTED = "rented"
    INACTIVE = "inactive"


class ListingType(str, enum.Enum):
    SALE = "sale"
    RENT = "rent"
    DAILY_RENT = "daily_rent"


class Currency(str, enum.Enum):
    """YE is the conventional dollar-pegged unit, UZS the Uzbek sum"""
    YE = "YE"
    UZS = "UZS"


class Property(Base):
    """Property listing"""
    __tablename__ = "properties"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Ownership
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Basic info
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    property_type = Column(value_enum(PropertyType), nullable=False, index=True)
    listing_type = Column(value_enum(ListingType), nullable=False, index=True)
    status = Column(value_enum(PropertyStatus), default=PropertyStatus.ACTIVE, nullable=False, index=True)

    # Pricing (whole units of the listing currency)
    price = Column(Integer, nullable=False, index=True)
    currency = Column(value_enum(Currency), default=Currency.YE, nullable=False)

    # Details
    area = Column(Float, nullable=False)  # sqm
    rooms = Column(Integer, nullable=True, index=True)
    floor = Column(Integer, nullable=True)
    total_floors = Column(Integer, nullable=True)

    # Location
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False, default="Tashkent", index=True)
    district = Column(String(100), nullable=True, index=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Filled by scripts/update_nearest_metro.py
    nearest_metro = Column(String(100), nullable=True, index=True)
    metro_distance = Column(Integer, nullable=True)  # meters

    # Counters
    view_count = Column(Integer, default=0, nullable=False)
    favorite_count = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    owner = relationship("User", foreign_keys=[user_id], backref="properties")
    price_history = relationship(
        "PriceHistory",
        back_populates="listing",
        cascade="all, delete-orphan",
        order_by="PriceHistory.created_at",
    )

    def __repr__(self):
        return f"<Property {self.title} ({self.city})>"

    @property
    def price_per_sqm(self) -> int:
        if self.area and self.area > 0:
            return round(self.price / self.area)
        return 0
