from enum import Enum

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from inventory_pro.models.tenant import Base, utcnow


class ActivityType(str, Enum):
    created = "created"
    added = "added"
    removed = "removed"
    deleted = "deleted"


class Activity(Base):
    """
    One audit entry per inventory change. Rows are appended, never edited.

    item_name and user_name are snapshots taken when the entry is written so
    history stays readable after the item or the user is deleted.
    """

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), nullable=False)
    # Magnitude of the applied change; the direction is carried by type. NULL for deletions.
    quantity_delta = Column(Integer, nullable=True)
    prior_quantity = Column(Integer, nullable=True)
    item_name = Column(String(255), nullable=False)
    user_name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="SET NULL"), nullable=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
