"""条款与细则服务：版本管理与商户确认。"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.packages.onboarding.core.constants import HTTP_STATUS_BAD_REQUEST, HTTP_STATUS_NOT_FOUND
from app.packages.onboarding.core.exceptions import AppException
from app.packages.onboarding.core.logger import logger
from app.packages.onboarding.core.responses import create_response
from app.packages.onboarding.core.timezone import format_datetime, utcnow
from app.packages.onboarding.crud.onboarding import onboarding_crud
from app.packages.onboarding.crud.terms_conditions import terms_conditions_crud
from app.packages.onboarding.models.terms_conditions import TermsConditions
from app.packages.onboarding.services.onboarding_service import onboarding_service


def serialize_terms(terms: TermsConditions) -> dict:
    return {
        "id": terms.id,
        "version": terms.version,
        "content": terms.content,
        "is_active": terms.is_active,
        "effective_date": format_datetime(terms.effective_date),
        "create_time": format_datetime(terms.created_at),
    }


class TermsService:
    def _get_or_404(self, db: Session, terms_id: str) -> TermsConditions:
        terms = terms_conditions_crud.get(db, terms_id)
        if terms is None:
            raise AppException(msg="条款版本不存在", code=HTTP_STATUS_NOT_FOUND)
        return terms

    def create(self, db: Session, *, version: str, content: str, effective_date=None) -> dict:
        """新版本创建即生效，同时停用其它所有版本。"""
        terms_conditions_crud.deactivate_all(db)
        terms = terms_conditions_crud.create(
            db,
            {
                "version": version,
                "content": content,
                "is_active": True,
                "effective_date": effective_date or utcnow(),
            },
        )
        logger.info("Terms version %s (%s) created and activated", terms.version, terms.id)
        return create_response("创建条款成功", serialize_terms(terms))

    def list_all(self, db: Session) -> dict:
        return create_response("获取条款列表成功", [serialize_terms(item) for item in terms_conditions_crud.list_all(db)])

    def update_content(self, db: Session, terms_id: str, *, content: str) -> dict:
        terms = self._get_or_404(db, terms_id)
        terms_conditions_crud.update(db, terms, {"content": content})
        return create_response("更新条款成功", serialize_terms(terms))

    def activate(self, db: Session, terms_id: str) -> dict:
        terms = self._get_or_404(db, terms_id)
        terms_conditions_crud.deactivate_all(db)
        terms_conditions_crud.update(db, terms, {"is_active": True})
        logger.info("Terms version %s (%s) activated", terms.version, terms.id)
        return create_response("启用条款成功", serialize_terms(terms))

    def _active_or_none(self, db: Session) -> Optional[TermsConditions]:
        return terms_conditions_crud.get_active(db)

    def get_active(self, db: Session) -> dict:
        terms = self._active_or_none(db)
        if terms is None:
            raise AppException(msg="暂无生效的条款", code=HTTP_STATUS_NOT_FOUND)
        return create_response("获取生效条款成功", serialize_terms(terms))

    def check(self, db: Session, token: str) -> dict:
        """返回商户是否已确认当前生效版本；确认的是旧版本时视为需要重新确认。"""
        record = onboarding_service.get_by_token_or_404(db, token)
        active = self._active_or_none(db)
        accepted_current = bool(
            record.terms_accepted and active is not None and record.terms_accepted_version_id == active.id
        )
        return create_response(
            "获取条款确认状态成功",
            {
                "accepted": accepted_current,
                "accepted_name": record.terms_accepted_name,
                "accepted_version_id": record.terms_accepted_version_id,
                "accepted_at": format_datetime(record.terms_accepted_at),
                "active_terms": serialize_terms(active) if active else None,
            },
        )

    def acknowledge(self, db: Session, token: str, *, name: str, terms_version_id: str) -> dict:
        record = onboarding_service.get_active_record_by_token(db, token)
        terms = self._get_or_404(db, terms_version_id)
        if not terms.is_active:
            raise AppException(msg="只能确认当前生效的条款版本", code=HTTP_STATUS_BAD_REQUEST)
        record.terms_accepted = True
        record.terms_accepted_name = name
        record.terms_accepted_version_id = terms.id
        record.terms_accepted_at = utcnow()
        onboarding_crud.save(db, record)
        logger.info("Onboarding %s accepted terms %s as %s", record.id, terms.version, name)
        return create_response(
            "确认条款成功",
            {
                "accepted": True,
                "accepted_name": record.terms_accepted_name,
                "accepted_version_id": record.terms_accepted_version_id,
                "accepted_at": format_datetime(record.terms_accepted_at),
            },
        )


terms_service = TermsService()
