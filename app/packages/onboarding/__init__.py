"""商户入驻业务包：入驻记录、条款确认、附件上传下载以及附件地址修复脚本。"""

from app.packages.types import AppPackage

from .api.v1 import api_router
from .core.config import get_settings
from .core.exceptions import generic_exception_handler, http_exception_handler
from .core.logger import logger, setup_logging
from .core.responses import create_response
from .db.init_db import init_db

package = AppPackage(
    name="onboarding",
    api_router=api_router,
    get_settings=get_settings,
    setup_logging=setup_logging,
    logger=logger,
    init_db=init_db,
    create_response=create_response,
    http_exception_handler=http_exception_handler,
    generic_exception_handler=generic_exception_handler,
    description="商户入驻：访问令牌、条款确认、产品配置附件上传与下载。",
)

__all__ = ["package", "api_router", "get_settings"]
