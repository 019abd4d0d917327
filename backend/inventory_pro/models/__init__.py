from .tenant import Tenant
from .user import User
from .item import Item
from .activity import Activity, ActivityType

__all__ = ["Tenant", "User", "Item", "Activity", "ActivityType"]
