from typing import List, Optional

from inventory_pro.models.user import User
from inventory_pro.repositories.base_repository import TenantScopedRepository


class UserRepository(TenantScopedRepository[User]):
    model = User
    not_found_message = "User not found"
    immutable_fields = TenantScopedRepository.immutable_fields | {"email"}

    def list_for_tenant(self, tenant_id: int) -> List[User]:
        return self.find(tenant_id, order_by=[User.created_at.asc(), User.id.asc()])

    def email_taken(self, email: str) -> bool:
        return self.exists_anywhere(email=email)

    def find_active_for_login(self, email: str) -> Optional[User]:
        """
        Login is the one lookup that runs before any tenant is known.

        The tenant is taken from the principal that is found, never from the request.
        """
        with self._session_operation("find_active_for_login", is_read_only=True):
            return self.db.query(User).filter(User.email == email, User.is_active.is_(True)).first()
