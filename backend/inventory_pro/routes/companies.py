from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db, run_with_retry
from inventory_pro.core.deps import get_current_context
from inventory_pro.core.security import create_token
from inventory_pro.core.serialization_helpers import serialize_company, serialize_session
from inventory_pro.services.tenant_service import get_company, register_company


router = APIRouter()


class RegisterRequest(BaseModel):
    companyName: str
    adminEmail: EmailStr
    adminPassword: str
    adminName: str


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    tenant, admin = run_with_retry(
        lambda: register_company(db, data.companyName, data.adminEmail, data.adminPassword, data.adminName)
    )
    token = create_token(admin.id, tenant.id, admin.role)
    return serialize_session(admin, tenant, token)


@router.get("/info")
def company_info(db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    return {"company": serialize_company(get_company(db, ctx))}
