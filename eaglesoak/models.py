from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from sqlalchemy import JSON, String, Integer, Float, Text, DateTime, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .db import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
PortableJSON = JSON().with_variant(JSONB(), "postgresql")


class Property(Base):
    __tablename__ = "properties"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[Optional[str]] = mapped_column(String(512))
    description: Mapped[Optional[str]] = mapped_column(Text)
    price: Mapped[Optional[float]] = mapped_column(Float)
    currency: Mapped[Optional[str]] = mapped_column(String(8))
    city: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    district: Mapped[Optional[str]] = mapped_column(String(255))
    bedrooms: Mapped[Optional[int]] = mapped_column(Integer)
    bathrooms: Mapped[Optional[int]] = mapped_column(Integer)
    sqft: Mapped[Optional[float]] = mapped_column(Float)
    amenities: Mapped[Optional[list]] = mapped_column(PortableJSON)
    seo_tags: Mapped[Optional[list]] = mapped_column(PortableJSON)
    investment_index: Mapped[Optional[float]] = mapped_column(Float)
    market_sentiment: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PropertyRecord(BaseModel):
    """Read-only snapshot of a catalog row, detached from the DB session."""

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    sqft: Optional[float] = None
    amenities: List[str] = Field(default_factory=list)
    seo_tags: List[str] = Field(default_factory=list)
    investment_index: Optional[float] = None
    market_sentiment: Optional[float] = None

    @classmethod
    def from_row(cls, row: Property) -> "PropertyRecord":
        data = {name: getattr(row, name) for name in cls.model_fields}
        data["amenities"] = [str(a) for a in (row.amenities or [])]
        data["seo_tags"] = [str(t) for t in (row.seo_tags or [])]
        return cls(**data)


class ContextDocument(BaseModel):
    property_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    score: Optional[float] = None
