"""
KYC router. Provider accounts start PENDING and only become ACTIVE once a
submission is approved, so these routes admit PENDING accounts as well.
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import require_account_status, require_account_types
from app.models.enums import AccountStatus, PROVIDER_ACCOUNT_TYPES
from app.models.user import User
from app.schemas.kyc import KycSubmitRequest, KycOut
from app.services import kyc_service

require_active_or_pending = require_account_status(AccountStatus.ACTIVE, AccountStatus.PENDING)
require_provider = require_account_types(*PROVIDER_ACCOUNT_TYPES)

router = APIRouter(dependencies=[Depends(require_active_or_pending)])


@router.post("/submit", response_model=KycOut, status_code=201)
def submit_kyc(
    body: KycSubmitRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_provider),
):
    return kyc_service.submit_kyc(
        db, current_user, document_type=body.document_type, document_url=str(body.document_url),
    )


@router.get("/status", response_model=List[KycOut])
def get_kyc_status(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_active_or_pending),
):
    """The caller's submissions, newest first."""
    return kyc_service.list_user_submissions(db, current_user)
