"""认证服务：校验入驻经理凭证并签发访问令牌。"""

from sqlalchemy.orm import Session

from app.packages.onboarding.core.constants import ACCESS_TOKEN_TYPE, HTTP_STATUS_OK, HTTP_STATUS_UNAUTHORIZED
from app.packages.onboarding.core.exceptions import AppException
from app.packages.onboarding.core.logger import logger
from app.packages.onboarding.core.responses import create_response
from app.packages.onboarding.core.security import create_access_token, verify_password
from app.packages.onboarding.core.timezone import format_datetime
from app.packages.onboarding.crud.onboarding_manager import onboarding_manager_crud
from app.packages.onboarding.models.onboarding_manager import OnboardingManager


def serialize_manager(manager: OnboardingManager) -> dict:
    return {
        "id": manager.id,
        "email": manager.email,
        "name": manager.name,
        "role": manager.role,
        "is_active": manager.is_active,
        "create_time": format_datetime(manager.created_at),
    }


class AuthService:
    def login(self, db: Session, *, email: str, password: str) -> dict:
        """邮箱大小写不敏感；账号停用与密码错误返回同样的提示，避免泄露账号状态。"""
        manager = onboarding_manager_crud.get_by_email(db, email)
        if manager is None or not manager.is_active or not verify_password(password, manager.hashed_password):
            logger.warning("Login failed for %s", (email or "").strip().lower())
            raise AppException(msg="邮箱或密码错误", code=HTTP_STATUS_UNAUTHORIZED)

        access_token = create_access_token({"manager_id": manager.id, "email": manager.email})
        logger.info("Manager %s logged in", manager.email)
        return create_response(
            "登录成功",
            {"access_token": access_token, "token_type": ACCESS_TOKEN_TYPE},
            HTTP_STATUS_OK,
        )

    def profile(self, manager: OnboardingManager) -> dict:
        return create_response("获取当前用户成功", serialize_manager(manager), HTTP_STATUS_OK)


auth_service = AuthService()
