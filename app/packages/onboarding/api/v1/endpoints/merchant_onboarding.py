"""商户侧路由：无需登录，通过入驻访问令牌定位记录。"""

from typing import List

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.packages.onboarding.api.v1.schemas.onboarding import (
    AttachmentListResponse,
    MerchantUpdateRequest,
    OnboardingResponse,
    TokenCheckResponse,
)
from app.packages.onboarding.api.v1.schemas.terms import (
    TermsAcknowledgeRequest,
    TermsCheckResponse,
    TermsResponse,
)
from app.packages.onboarding.core.dependencies import get_db
from app.packages.onboarding.services.attachment_service import AttachmentUpload, attachment_service
from app.packages.onboarding.services.onboarding_service import onboarding_service
from app.packages.onboarding.services.terms_service import terms_service

router = APIRouter(prefix="/merchant-onboarding", tags=["merchant-onboarding"])


@router.get("/access/{token}", response_model=OnboardingResponse)
def access_onboarding(token: str, db: Session = Depends(get_db)) -> OnboardingResponse:
    """打开商户链接；令牌过期时返回的记录中携带轮换后的新令牌。"""
    return onboarding_service.access_by_token(db, token)


@router.get("/check-token/{token}", response_model=TokenCheckResponse)
def check_token(token: str, db: Session = Depends(get_db)) -> TokenCheckResponse:
    return onboarding_service.check_token(db, token)


@router.patch("/update/{token}", response_model=OnboardingResponse)
def update_onboarding(
    token: str, payload: MerchantUpdateRequest, db: Session = Depends(get_db)
) -> OnboardingResponse:
    return onboarding_service.merchant_update(db, token, payload.model_dump(exclude_unset=True))


@router.post("/upload-attachments/{token}", response_model=AttachmentListResponse)
async def upload_attachments(
    token: str,
    files: List[UploadFile] = File(..., description="产品配置文件"),
    db: Session = Depends(get_db),
) -> AttachmentListResponse:
    uploads = []
    for item in files:
        uploads.append(
            AttachmentUpload(filename=item.filename or "", content_type=item.content_type, content=await item.read())
        )
        await item.close()
    return attachment_service.upload(db, token, uploads)


@router.get("/terms-conditions/active", response_model=TermsResponse)
def get_active_terms(db: Session = Depends(get_db)) -> TermsResponse:
    return terms_service.get_active(db)


@router.get("/terms-conditions/check/{token}", response_model=TermsCheckResponse)
def check_terms(token: str, db: Session = Depends(get_db)) -> TermsCheckResponse:
    return terms_service.check(db, token)


@router.post("/terms-conditions/acknowledge/{token}", response_model=TermsCheckResponse)
def acknowledge_terms(
    token: str, payload: TermsAcknowledgeRequest, db: Session = Depends(get_db)
) -> TermsCheckResponse:
    return terms_service.acknowledge(db, token, name=payload.name, terms_version_id=payload.terms_version_id)
