"""
Wire formats for API responses.
No business rules here, only field naming and formatting.
"""
from typing import Any, Dict, Optional

from inventory_pro.models.activity import Activity
from inventory_pro.models.item import Item
from inventory_pro.models.tenant import Tenant
from inventory_pro.models.user import User


def serialize_datetime(value) -> Optional[str]:
    """ISO-8601 string, or None"""
    if value is None:
        return None
    return value.isoformat()


def serialize_item(item: Item) -> Dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "quantity": item.quantity,
        "barcode": item.barcode,
        "updated_at": serialize_datetime(item.updated_at),
    }


def serialize_activity(activity: Activity) -> Dict[str, Any]:
    return {
        "id": activity.id,
        "type": activity.type,
        "quantity": activity.quantity_delta,
        "old_quantity": activity.prior_quantity,
        "item_name": activity.item_name,
        "user_name": activity.user_name,
        "created_at": serialize_datetime(activity.created_at),
    }


def serialize_company(tenant: Tenant) -> Dict[str, Any]:
    return {
        "id": tenant.id,
        "name": tenant.name,
        "code": tenant.code,
        "subscription_tier": tenant.subscription_tier,
        "max_users": tenant.max_users,
    }


def serialize_session_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "created_at": serialize_datetime(user.created_at),
    }


def serialize_managed_user(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "isActive": user.is_active,
        "lastLogin": serialize_datetime(user.last_login_at),
        "created_at": serialize_datetime(user.created_at),
    }


def serialize_session(user: User, tenant: Tenant, token: str) -> Dict[str, Any]:
    """Body returned by login and registration"""
    return {
        "success": True,
        "user": serialize_session_user(user),
        "company": serialize_company(tenant),
        "token": token,
    }
