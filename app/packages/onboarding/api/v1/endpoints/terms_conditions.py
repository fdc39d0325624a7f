"""条款与细则版本管理路由（经理侧）。"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.onboarding.api.v1.schemas.terms import (
    TermsCreateRequest,
    TermsListResponse,
    TermsResponse,
    TermsUpdateRequest,
)
from app.packages.onboarding.core.dependencies import get_current_manager, get_db
from app.packages.onboarding.models.onboarding_manager import OnboardingManager
from app.packages.onboarding.services.terms_service import terms_service

router = APIRouter(prefix="/onboarding/terms-conditions", tags=["terms-conditions"])


@router.post("", response_model=TermsResponse)
def create_terms(
    payload: TermsCreateRequest,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> TermsResponse:
    """新建条款版本，创建后立即生效。"""
    return terms_service.create(
        db, version=payload.version, content=payload.content, effective_date=payload.effective_date
    )


@router.get("", response_model=TermsListResponse)
def list_terms(
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> TermsListResponse:
    return terms_service.list_all(db)


@router.patch("/{terms_id}", response_model=TermsResponse)
def update_terms(
    terms_id: str,
    payload: TermsUpdateRequest,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> TermsResponse:
    return terms_service.update_content(db, terms_id, content=payload.content)


@router.patch("/{terms_id}/activate", response_model=TermsResponse)
def activate_terms(
    terms_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> TermsResponse:
    return terms_service.activate(db, terms_id)
