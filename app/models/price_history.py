from sqlalchemy import Column, DateTime, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid
from app.core.database import Base
from app.models.enums import value_enum
from app.models.property import Currency


class PriceHistory(Base):
    """One recorded price change of a property"""
    __tablename__ = "price_history"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    property_id = Column(Uuid, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)

    old_price = Column(Integer, nullable=False)
    new_price = Column(Integer, nullable=False)
    currency = Column(value_enum(Currency), default=Currency.YE, nullable=False)

    # Who changed it (owner, agent or admin); null for generated data
    changed_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    listing = relationship("Property", back_populates="price_history")
    user = relationship("User", foreign_keys=[changed_by])

    def __repr__(self):
        return f"<PriceHistory property={self.property_id} {self.old_price}->{self.new_price}>"

    @property
    def change_percent(self) -> float:
        if not self.old_price:
            return 0.0
        return round((self.new_price - self.old_price) / self.old_price * 100, 2)
