"""
Credential store: password verification and principal creation.

Every failed login answers with the same InvalidCredentials, whether the
email is unknown, the account disabled or the password wrong.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from inventory_pro.core.errors import DuplicateEmail, DuplicateRecord, InvalidCredentials
from inventory_pro.core.roles import Role
from inventory_pro.core.security import dummy_verify, verify_password
from inventory_pro.models.tenant import utcnow
from inventory_pro.models.user import User
from inventory_pro.repositories.user_repository import UserRepository


logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def authenticate(db: Session, email: str, password: str) -> User:
    user = UserRepository(db).find_active_for_login(normalize_email(email))
    if user is None:
        dummy_verify()
        raise InvalidCredentials()
    if not verify_password(password, user.hashed_password):
        raise InvalidCredentials()
    return user


def record_login(db: Session, user: User) -> None:
    """Stamp last_login_at. Caller commits."""
    user.last_login_at = utcnow()
    db.flush()


def create_principal(
    db: Session,
    tenant_id: int,
    email: str,
    name: str,
    password_hash: str,
    role: str,
    is_active: Optional[bool] = True,
) -> User:
    """Add a principal to the tenant. Caller owns the transaction."""
    repo = UserRepository(db)
    normalized = normalize_email(email)
    if repo.email_taken(normalized):
        raise DuplicateEmail()
    user = User(
        email=normalized,
        name=name.strip(),
        hashed_password=password_hash,
        role=Role(role).value,
        is_active=is_active,
    )
    try:
        repo.insert(tenant_id, user)
    except DuplicateRecord as e:
        # Lost a race with a concurrent insert of the same email
        raise DuplicateEmail() from e
    logger.info("Principal %s created in tenant %s", user.id, tenant_id)
    return user
