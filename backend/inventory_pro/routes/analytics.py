from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db
from inventory_pro.core.deps import get_current_context
from inventory_pro.services.analytics_service import get_analytics


router = APIRouter()


@router.get("")
def analytics(db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    return get_analytics(db, ctx)
