"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from collections.abc import Generator
from typing import Optional

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.packages.onboarding.core.constants import ACCESS_TOKEN_TYPE
from app.packages.onboarding.core.security import decode_token
from app.packages.onboarding.crud.onboarding_manager import onboarding_manager_crud
from app.packages.onboarding.db import session as db_session
from app.packages.onboarding.models.onboarding_manager import OnboardingManager

security_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """生成一个数据库会话，并在请求结束后自动关闭。"""
    db = db_session.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _resolve_manager(db: Session, token: Optional[str]) -> OnboardingManager:
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="缺少认证信息")

    payload = decode_token(token)
    if payload is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token 无效或已过期")

    manager_id = payload.get("manager_id")
    if manager_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token 无效")

    manager = onboarding_manager_crud.get(db, manager_id)
    if manager is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="用户不存在")
    if not manager.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="用户未激活")
    return manager


def _bearer_token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    if not credentials:
        return None
    if credentials.scheme.lower() != ACCESS_TOKEN_TYPE:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="认证类型无效")
    return credentials.credentials


def get_current_manager(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> OnboardingManager:
    """解析 ``Authorization`` 头部并返回当前入驻经理，不存在或非法时抛出 401。"""
    return _resolve_manager(db, _bearer_token(credentials))


def get_current_manager_for_download(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    token: Optional[str] = Query(default=None, description="浏览器直链下载时携带的访问令牌"),
    db: Session = Depends(get_db),
) -> OnboardingManager:
    """下载链接由浏览器直接打开，无法附带请求头，因此同时接受 ``?token=`` 参数。"""
    return _resolve_manager(db, _bearer_token(credentials) or token)
