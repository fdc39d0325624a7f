"""业务包元数据：主应用只通过这里声明的入口与具体业务包交互。"""

from __future__ import annotations

from dataclasses import dataclass
from logging import Logger
from typing import Any, Awaitable, Callable

from fastapi import APIRouter


@dataclass(frozen=True)
class AppPackage:
    """描述一个业务包暴露给主应用的路由、配置、日志与异常处理入口。"""

    name: str
    api_router: APIRouter
    get_settings: Callable[[], Any]
    setup_logging: Callable[[], None]
    logger: Logger
    init_db: Callable[[], None]
    create_response: Callable[..., dict]
    http_exception_handler: Callable[..., Awaitable[Any]]
    generic_exception_handler: Callable[..., Awaitable[Any]]
    description: str = ""
