"""附件下载路由：经理凭登录令牌（请求头或查询参数）下载商户上传的文件。"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from app.packages.onboarding.core.dependencies import get_current_manager_for_download, get_db
from app.packages.onboarding.models.onboarding_manager import OnboardingManager
from app.packages.onboarding.services.attachment_service import attachment_service

router = APIRouter(prefix="/files", tags=["files"])


@router.get("/attachment/{attachment_id}/download")
def download_attachment(
    attachment_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager_for_download),
) -> RedirectResponse:
    """跳转到临时签名地址，以附件形式下载。"""
    url = attachment_service.download_url(db, attachment_id)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.get("/attachment/{attachment_id}/view")
def view_attachment(
    attachment_id: str,
    db: Session = Depends(get_db),
    _: OnboardingManager = Depends(get_current_manager_for_download),
) -> RedirectResponse:
    return RedirectResponse(attachment_service.view_url(db, attachment_id), status_code=status.HTTP_302_FOUND)
