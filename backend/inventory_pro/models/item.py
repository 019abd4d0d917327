from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint

from inventory_pro.core.config import settings
from inventory_pro.models.tenant import Base, utcnow


BARCODE_INDEX_NAME = "ix_items_barcode"
# Largest value the integer quantity column holds on every supported store
MAX_QUANTITY = 2**31 - 1


class Item(Base):
    __tablename__ = "items"
    __table_args__ = (
        UniqueConstraint("tenant_id", "barcode", name="uq_items_tenant_barcode"),
        # Unique across all tenants when barcodes are globally scoped
        Index(BARCODE_INDEX_NAME, "barcode", unique=settings.barcode_scope == "global"),
        CheckConstraint("quantity >= 0", name="ck_items_quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    barcode = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)
