from app.models.user import User, UserRole
from app.models.property import Property, PropertyType, PropertyStatus, ListingType, Currency
from app.models.favorite import Favorite
from app.models.price_history import PriceHistory
from app.models.metro_station import MetroStation, MetroLine
from app.models.property_analytics import PropertyAnalytics

__all__ = [
    "User",
    "UserRole",
    "Property",
    "PropertyType",
    "PropertyStatus",
    "ListingType",
    "Currency",
    "Favorite",
    "PriceHistory",
    "MetroStation",
    "MetroLine",
    "PropertyAnalytics",
]
