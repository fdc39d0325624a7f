"""可达性探测：对单个地址发起 HEAD 请求并把结果归为三类之一。"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from app.packages.onboarding.core.logger import get_logger

logger = get_logger("reachability")


class ProbeOutcome(str, Enum):
    REACHABLE = "reachable"
    NOT_FOUND = "not-found"
    OTHER_ERROR = "other-error"


@dataclass(frozen=True)
class ProbeResult:
    url: str
    outcome: ProbeOutcome
    status_code: Optional[int] = None
    error: Optional[str] = None

    @property
    def reachable(self) -> bool:
        return self.outcome is ProbeOutcome.REACHABLE

    def describe(self) -> str:
        if self.error:
            return f"{self.outcome.value} ({self.error})"
        return f"{self.outcome.value} ({self.status_code})"


def classify_status(status_code: int) -> ProbeOutcome:
    if 200 <= status_code < 300:
        return ProbeOutcome.REACHABLE
    if status_code == 404:
        return ProbeOutcome.NOT_FOUND
    return ProbeOutcome.OTHER_ERROR


class ReachabilityProber:
    """只发 HEAD，不下载正文；网络异常被吞并归类为 ``other-error``，不修改任何状态。"""

    def __init__(self, session: Optional[requests.Session] = None, *, timeout: Optional[float] = None) -> None:
        self.session = session or requests.Session()
        self.timeout = timeout

    def probe(self, url: str) -> ProbeResult:
        if not (url or "").strip():
            return ProbeResult(url=url or "", outcome=ProbeOutcome.OTHER_ERROR, error="empty url")
        try:
            response = self.session.head(url, allow_redirects=True, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.debug("HEAD %s failed: %s", url, exc)
            return ProbeResult(
                url=url,
                outcome=ProbeOutcome.OTHER_ERROR,
                error=f"network unreachable: {exc.__class__.__name__}",
            )
        try:
            status_code = int(response.status_code)
        finally:
            response.close()
        logger.debug("HEAD %s -> %s", url, status_code)
        return ProbeResult(url=url, outcome=classify_status(status_code), status_code=status_code)

    def close(self) -> None:
        self.session.close()
