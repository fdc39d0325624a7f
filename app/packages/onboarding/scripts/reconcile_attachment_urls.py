"""运维脚本：检查并修复附件表中失效的 Cloudinary 地址。

用法::

    python -m app.packages.onboarding.scripts.reconcile_attachment_urls [--limit N]

数据库与 Cloudinary 凭证均从环境变量读取。缺少必需配置时以状态码 2 退出，
且不会处理任何记录。
"""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from app.packages.onboarding.core.config import get_settings
from app.packages.onboarding.core.exceptions import ConfigurationMissing
from app.packages.onboarding.core.logger import get_logger, setup_logging
from app.packages.onboarding.db import session as db_session
from app.packages.onboarding.services.reconciliation import (
    ReconciliationConfig,
    ReconciliationSummary,
    reconcile_attachment_urls,
)

EXIT_CONFIGURATION_MISSING = 2

logger = get_logger("scripts.reconcile")


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("--limit must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Probe stored attachment urls and repair broken ones")
    parser.add_argument(
        "--limit",
        type=_positive_int,
        default=None,
        help="Only process the N most recently uploaded attachments (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every probe at DEBUG level")
    return parser


def print_summary(summary: ReconciliationSummary) -> None:
    print("Attachment url reconciliation summary")
    for key, value in summary.as_dict().items():
        print(f"  {key:<28} {value}")
    for report in summary.records:
        if report.new_url:
            print(f"  fixed {report.attachment_id} ({report.original_name}): {report.new_url}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else None)

    try:
        config = ReconciliationConfig.from_settings(get_settings())
    except ConfigurationMissing as exc:
        logger.error("%s", exc)
        return EXIT_CONFIGURATION_MISSING

    with db_session.SessionLocal() as db:
        summary = reconcile_attachment_urls(db, config, limit=args.limit)
    print_summary(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
