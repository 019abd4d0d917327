from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from inventory_pro.core.context import TenantContext
from inventory_pro.core.database import get_db
from inventory_pro.core.deps import get_current_context
from inventory_pro.core.serialization_helpers import serialize_activity
from inventory_pro.services import ledger_service


router = APIRouter()


@router.get("")
def list_activities(db: Session = Depends(get_db), ctx: TenantContext = Depends(get_current_context)):
    """Newest audit entries for the caller's tenant"""
    return [serialize_activity(entry) for entry in ledger_service.list_activities(db, ctx)]
