from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..db import session_scope
from ..errors import PropertyLookupError
from ..models import Property, PropertyRecord


class PropertyCatalog:
    """Read-only access to the ``properties`` table."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory

    def fetch_property(self, property_id: str) -> Optional[PropertyRecord]:
        try:
            with session_scope(self.session_factory) as s:
                row = s.execute(select(Property).where(Property.id == property_id).limit(1)).scalar_one_or_none()
                return PropertyRecord.from_row(row) if row else None
        except SQLAlchemyError as exc:
            raise PropertyLookupError(f"Property lookup failed for {property_id}: {exc}") from exc
