from pydantic import BaseModel, Field, field_validator, model_validator, ValidationInfo
from typing import Optional, List
from datetime import datetime
from uuid import UUID
from app.models.property import PropertyType, PropertyStatus, ListingType, Currency


# Base schema
class PropertyBase(BaseModel):
    title: str = Field(..., min_length=5, max_length=200)
    description: Optional[str] = None
    property_type: PropertyType
    listing_type: ListingType
    price: int = Field(..., gt=0, description="Price in YE or UZS (whole number)")
    currency: Currency = Currency.YE
    area: float = Field(..., gt=0, description="Total area in square meters")
    rooms: Optional[int] = Field(None, ge=1)
    floor: Optional[int] = None
    total_floors: Optional[int] = Field(None, ge=1)
    address: str = Field(..., min_length=5, max_length=255)
    city: str = "Tashkent"
    district: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


# Request schemas
class PropertyCreate(PropertyBase):
    """Schema for creating a property"""

    @model_validator(mode="after")
    def validate_floor(self):
        if self.floor is not None and self.total_floors is not None and self.floor > self.total_floors:
            raise ValueError("Floor cannot be above total floors")
        return self


class PropertyUpdate(BaseModel):
    """Schema for updating a property. A new price is recorded in price history."""
    title: Optional[str] = Field(None, min_length=5, max_length=200)
    description: Optional[str] = None
    status: Optional[PropertyStatus] = None
    price: Optional[int] = Field(None, gt=0)
    currency: Optional[Currency] = None
    area: Optional[float] = Field(None, gt=0)
    rooms: Optional[int] = Field(None, ge=1)
    floor: Optional[int] = None
    total_floors: Optional[int] = Field(None, ge=1)
    address: Optional[str] = Field(None, min_length=5, max_length=255)
    city: Optional[str] = None
    district: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator('title', 'status', 'price', 'currency', 'area', 'address', 'city')
    @classmethod
    def reject_null(cls, v, info: ValidationInfo):
        # Omit a field to leave it unchanged; these columns are NOT NULL
        if v is None:
            raise ValueError(f'{info.field_name} cannot be null')
        return v


# Response schemas
class PropertyResponse(PropertyBase):
    """Full property response"""
    id: UUID
    user_id: UUID
    status: PropertyStatus
    price_per_sqm: int
    nearest_metro: Optional[str] = None
    metro_distance: Optional[int] = None
    view_count: int
    favorite_count: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PropertyListItem(BaseModel):
    """Compact property for list views"""
    id: UUID
    title: str
    property_type: PropertyType
    listing_type: ListingType
    status: PropertyStatus
    price: int
    currency: Currency
    area: float
    rooms: Optional[int]
    city: str
    district: Optional[str]
    nearest_metro: Optional[str] = None
    metro_distance: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True


class PropertyFilters(BaseModel):
    """Query filters for the listing endpoint"""
    city: Optional[str] = None
    district: Optional[str] = None
    property_type: Optional[PropertyType] = None
    listing_type: Optional[ListingType] = None
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    rooms: Optional[int] = Field(None, ge=1)
    nearest_metro: Optional[str] = None
    max_metro_distance: Optional[int] = Field(None, ge=0, description="Meters")
    owner_id: Optional[UUID] = None

    @field_validator('max_price')
    @classmethod
    def validate_price_range(cls, v, info: ValidationInfo):
        min_price = info.data.get('min_price')
        if v is not None and min_price is not None and v < min_price:
            raise ValueError('max_price must be greater than min_price')
        return v


class PropertyListResponse(BaseModel):
    """Paginated list of properties"""
    items: List[PropertyListItem]
    total: int
    page: int
    page_size: int
    total_pages: int
