from inventory_pro.core.context import TenantContext
from inventory_pro.core.errors import Forbidden, SelfDeletion
from inventory_pro.core.roles import ADMIN_ROLES, Role


def require_role(ctx: TenantContext, required_role: Role) -> None:
    if required_role == Role.member:
        return
    if ctx.role not in {r.value for r in ADMIN_ROLES}:
        raise Forbidden()


def require_admin(ctx: TenantContext) -> None:
    require_role(ctx, Role.admin)


def forbid_self_deletion(ctx: TenantContext, target_user_id: int) -> None:
    if target_user_id == ctx.user_id:
        raise SelfDeletion()
