from dataclasses import dataclass


@dataclass(frozen=True)
class TenantContext:
    """Identity of the acting principal, passed explicitly into every service call."""

    tenant_id: int
    user_id: int
    user_name: str
    role: str
