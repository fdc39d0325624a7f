"""附件地址修复：逐条探测已存储的 Cloudinary 地址，失效时寻找可用的替代地址并落库。

处理流程严格串行：一条记录、一个候选地址依次进行。每条记录独立提交，
单条记录写库失败会回滚并记录日志，不影响其余记录。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.packages.onboarding.core.config import Settings
from app.packages.onboarding.core.exceptions import ConfigurationMissing
from app.packages.onboarding.core.logger import get_logger
from app.packages.onboarding.crud.attachment import attachment_crud
from app.packages.onboarding.models.attachment import ProductSetupAttachment
from app.packages.onboarding.services.cloudinary_storage import CloudinaryCredentials
from app.packages.onboarding.services.reachability import ProbeResult, ReachabilityProber
from app.packages.onboarding.services.url_resolver import iter_candidate_urls, normalize_resource_types

logger = get_logger("reconciliation")


class RecordOutcome(str, Enum):
    WORKING = "working"
    FIXED = "fixed"
    ACCESS_RESTRICTED = "diagnosed-access-restricted"
    UNRECOVERABLE = "unrecoverable"


class PersistenceFailure(RuntimeError):
    """写回修复后的地址时数据库报错。"""

    def __init__(self, attachment_id: str, cause: Exception) -> None:
        self.attachment_id = attachment_id
        self.cause = cause
        super().__init__(f"Failed to persist url for attachment {attachment_id}: {cause}")


@dataclass(frozen=True)
class ReconciliationConfig:
    credentials: CloudinaryCredentials
    resource_types: tuple[str, ...]
    include_signed_probe: bool = True
    signed_url_ttl_seconds: int = 3600
    probe_timeout_seconds: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "ReconciliationConfig":
        """从环境配置构造；缺少数据库或 Cloudinary 配置时抛出 ``ConfigurationMissing``。"""
        missing: list[str] = []
        if not settings.database_configured:
            missing.append("DATABASE_URL")
        try:
            credentials = CloudinaryCredentials.from_settings(settings)
        except ConfigurationMissing as exc:
            missing.extend(exc.missing)
            credentials = None
        if missing:
            raise ConfigurationMissing(missing)
        return cls(
            credentials=credentials,
            resource_types=normalize_resource_types(settings.cloudinary_candidate_resource_types),
            include_signed_probe=settings.cloudinary_signed_probe,
            signed_url_ttl_seconds=settings.signed_url_ttl_seconds,
            probe_timeout_seconds=settings.probe_timeout_seconds,
        )


@dataclass
class RecordReport:
    attachment_id: str
    original_name: str
    outcome: RecordOutcome
    old_url: str
    new_url: Optional[str] = None
    probes: list[ProbeResult] = field(default_factory=list)
    note: Optional[str] = None

    def describe(self) -> str:
        trail = "; ".join(f"{probe.url} -> {probe.describe()}" for probe in self.probes)
        parts = [
            f"id={self.attachment_id}",
            f"name={self.original_name!r}",
            f"outcome={self.outcome.value}",
            f"old={self.old_url}",
        ]
        if self.new_url:
            parts.append(f"new={self.new_url}")
        if self.note:
            parts.append(f"note={self.note}")
        parts.append(f"probes=[{trail}]")
        return " ".join(parts)


@dataclass
class ReconciliationSummary:
    working: int = 0
    fixed: int = 0
    access_restricted: int = 0
    unrecoverable: int = 0
    records: list[RecordReport] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.records)

    def add(self, report: RecordReport) -> None:
        self.records.append(report)
        if report.outcome is RecordOutcome.WORKING:
            self.working += 1
        elif report.outcome is RecordOutcome.FIXED:
            self.fixed += 1
        elif report.outcome is RecordOutcome.ACCESS_RESTRICTED:
            self.access_restricted += 1
        else:
            self.unrecoverable += 1

    def as_dict(self) -> dict[str, int]:
        return {
            RecordOutcome.WORKING.value: self.working,
            RecordOutcome.FIXED.value: self.fixed,
            RecordOutcome.ACCESS_RESTRICTED.value: self.access_restricted,
            RecordOutcome.UNRECOVERABLE.value: self.unrecoverable,
            "total": self.total,
        }


class AttachmentUrlReconciler:
    """对一批附件执行探测与修复。

    ``prober`` 需提供 ``probe(url) -> ProbeResult``，测试中可替换为假的实现；
    ``persist`` 默认更新 ``cloudinaryUrl`` 并提交，失败时抛出 ``PersistenceFailure``。
    """

    def __init__(
        self,
        db: Session,
        config: ReconciliationConfig,
        *,
        prober: Optional[ReachabilityProber] = None,
        persist: Optional[Callable[[ProductSetupAttachment, str], None]] = None,
    ) -> None:
        self.db = db
        self.config = config
        self.prober = prober or ReachabilityProber(timeout=config.probe_timeout_seconds)
        self.persist = persist or self._persist_url

    def run(self, *, limit: Optional[int] = None) -> ReconciliationSummary:
        attachments = attachment_crud.list_recent(self.db, limit=limit)
        logger.info("Reconciling %d attachment url(s)", len(attachments))
        return self.reconcile(attachments)

    def reconcile(self, attachments: Iterable[ProductSetupAttachment]) -> ReconciliationSummary:
        summary = ReconciliationSummary()
        for attachment in attachments:
            report = self.reconcile_one(attachment)
            summary.add(report)
            log = logger.warning if report.outcome is RecordOutcome.UNRECOVERABLE else logger.info
            log("Attachment %s", report.describe())
        logger.info("Reconciliation finished: %s", summary.as_dict())
        return summary

    def reconcile_one(self, attachment: ProductSetupAttachment) -> RecordReport:
        old_url = attachment.cloudinary_url or ""
        report = RecordReport(
            attachment_id=attachment.id,
            original_name=attachment.original_name,
            outcome=RecordOutcome.UNRECOVERABLE,
            old_url=old_url,
        )

        current = self.prober.probe(old_url)
        report.probes.append(current)
        if current.reachable:
            report.outcome = RecordOutcome.WORKING
            return report

        signed_reachable = False
        candidates = iter_candidate_urls(
            attachment.cloudinary_public_id,
            credentials=self.config.credentials,
            resource_types=self.config.resource_types,
            include_signed=self.config.include_signed_probe,
            mime_type=attachment.mime_type,
            signed_ttl_seconds=self.config.signed_url_ttl_seconds,
        )
        for candidate in candidates:
            if candidate.url == old_url:
                continue
            result = self.prober.probe(candidate.url)
            report.probes.append(result)
            if not result.reachable:
                continue
            if candidate.signed:
                signed_reachable = True
                break
            try:
                self.persist(attachment, candidate.url)
            except PersistenceFailure as exc:
                logger.error("%s", exc)
                report.note = f"persistence failure: {exc.cause}"
                return report
            report.outcome = RecordOutcome.FIXED
            report.new_url = candidate.url
            return report

        if signed_reachable:
            report.outcome = RecordOutcome.ACCESS_RESTRICTED
            report.note = "only the signed url is reachable; the asset is access-restricted"
        return report

    def _persist_url(self, attachment: ProductSetupAttachment, url: str) -> None:
        try:
            attachment_crud.update(self.db, attachment, {"cloudinary_url": url})
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise PersistenceFailure(attachment.id, exc) from exc


def reconcile_attachment_urls(
    db: Session,
    config: ReconciliationConfig,
    *,
    limit: Optional[int] = None,
    prober: Optional[ReachabilityProber] = None,
) -> ReconciliationSummary:
    """便捷入口：对最近 ``limit`` 条（为空时全部）附件执行一次修复。"""
    return AttachmentUrlReconciler(db, config, prober=prober).run(limit=limit)
