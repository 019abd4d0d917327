from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, UniqueConstraint, DateTime
from sqlalchemy.orm import declarative_base


Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Tenant(Base):
    __tablename__ = "tenants"
    __table_args__ = (UniqueConstraint("code", name="uq_tenant_code"),)

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    # Human-shareable join code, never reassigned
    code = Column(String(32), nullable=False, index=True)
    subscription_tier = Column(String(50), nullable=False, default="trial")
    max_users = Column(Integer, nullable=False, default=50)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
