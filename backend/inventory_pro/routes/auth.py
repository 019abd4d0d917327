import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from inventory_pro.core.database import get_db, run_with_retry, unit_of_work
from inventory_pro.core.security import create_token
from inventory_pro.core.serialization_helpers import serialize_session
from inventory_pro.services.credential_service import authenticate, record_login


router = APIRouter()
logger = logging.getLogger(__name__)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, data.email, data.password)

    def _stamp():
        with unit_of_work(db):
            record_login(db, user)

    run_with_retry(_stamp)
    token = create_token(user.id, user.tenant_id, user.role)
    logger.info("Login successful for user %s", user.id)
    return serialize_session(user, user.tenant, token)
