"""认证相关路由定义。"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.packages.onboarding.api.v1.schemas.auth import LoginRequest, ManagerProfileResponse, TokenResponse
from app.packages.onboarding.core.dependencies import get_current_manager, get_db
from app.packages.onboarding.models.onboarding_manager import OnboardingManager
from app.packages.onboarding.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """校验凭证并签发访问令牌。"""
    return auth_service.login(db, email=payload.email, password=payload.password)


@router.get("/me", response_model=ManagerProfileResponse)
def me(current_manager: OnboardingManager = Depends(get_current_manager)) -> ManagerProfileResponse:
    return auth_service.profile(current_manager)
