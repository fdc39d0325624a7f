"""入驻记录管理路由（经理侧，需要登录）。"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.onboarding.api.v1.schemas.onboarding import (
    AttachmentListResponse,
    OnboardingCreateRequest,
    OnboardingListResponse,
    OnboardingResponse,
    OnboardingStatusUpdateRequest,
    OnboardingUpdateRequest,
)
from app.packages.onboarding.core.dependencies import get_current_manager, get_db
from app.packages.onboarding.models.onboarding_manager import OnboardingManager
from app.packages.onboarding.services.onboarding_service import onboarding_service

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


@router.post("", response_model=OnboardingResponse)
def create_onboarding(
    payload: OnboardingCreateRequest,
    db: Session = Depends(get_db),
    current_manager: OnboardingManager = Depends(get_current_manager),
) -> OnboardingResponse:
    """新建入驻记录并生成商户访问令牌。"""
    return onboarding_service.create(db, manager=current_manager, payload=payload.model_dump())


@router.get("", response_model=OnboardingListResponse)
def list_onboardings(
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> OnboardingListResponse:
    return onboarding_service.list_all(db)


@router.get("/my-records", response_model=OnboardingListResponse)
def list_my_onboardings(
    db: Session = Depends(get_db),
    current_manager: OnboardingManager = Depends(get_current_manager),
) -> OnboardingListResponse:
    """仅返回当前经理创建的入驻记录。"""
    return onboarding_service.list_mine(db, manager=current_manager)


@router.get("/{onboarding_id}", response_model=OnboardingResponse)
def get_onboarding(
    onboarding_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> OnboardingResponse:
    return onboarding_service.get_detail(db, onboarding_id)


@router.patch("/{onboarding_id}", response_model=OnboardingResponse)
def update_onboarding(
    onboarding_id: str,
    payload: OnboardingUpdateRequest,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> OnboardingResponse:
    return onboarding_service.update(db, onboarding_id, payload.model_dump(exclude_unset=True))


@router.patch("/{onboarding_id}/status", response_model=OnboardingResponse)
def update_onboarding_status(
    onboarding_id: str,
    payload: OnboardingStatusUpdateRequest,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> OnboardingResponse:
    return onboarding_service.update_status(db, onboarding_id, payload.status)


@router.post("/{onboarding_id}/regenerate-token", response_model=OnboardingResponse)
def regenerate_onboarding_token(
    onboarding_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> OnboardingResponse:
    """作废旧令牌并签发新令牌，旧链接随即失效。"""
    return onboarding_service.regenerate_token(db, onboarding_id)


@router.get("/{onboarding_id}/attachments", response_model=AttachmentListResponse)
def list_onboarding_attachments(
    onboarding_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager),
) -> AttachmentListResponse:
    return onboarding_service.list_attachments(db, onboarding_id)
