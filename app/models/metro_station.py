from sqlalchemy import Column, String, Boolean, Integer, Float, Uuid
import uuid
import enum
from app.core.database import Base
from app.models.enums import value_enum


class MetroLine(str, enum.Enum):
    CHILANZAR = "chilanzar"
    UZBEKISTAN = "uzbekistan"
    YUNUSABAD = "yunusabad"


class MetroStation(Base):
    """Tashkent metro station"""
    __tablename__ = "metro_stations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    name_ru = Column(String(100), nullable=False)
    name_uz = Column(String(100), nullable=False)

    line = Column(value_enum(MetroLine), nullable=False, index=True)
    line_name_ru = Column(String(100), nullable=False)
    line_name_uz = Column(String(100), nullable=False)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    order = Column(Integer, nullable=False)  # position along the line
    opened_year = Column(Integer, nullable=True)
    is_operational = Column(Boolean, default=True, nullable=False, index=True)

    def __repr__(self):
        return f"<MetroStation {self.name_uz} ({self.line.value if self.line else '?'})>"
