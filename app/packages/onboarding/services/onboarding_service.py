"""入驻记录服务：经理侧的增删改查，以及商户通过访问令牌读写自己的记录。"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy.orm import Session

from app.packages.onboarding.core.config import get_settings
from app.packages.onboarding.core.constants import HTTP_STATUS_BAD_REQUEST, HTTP_STATUS_NOT_FOUND, HTTP_STATUS_OK
from app.packages.onboarding.core.enums import OnboardingStatusEnum
from app.packages.onboarding.core.exceptions import AppException
from app.packages.onboarding.core.logger import logger
from app.packages.onboarding.core.responses import create_response
from app.packages.onboarding.core.security import generate_onboarding_token
from app.packages.onboarding.core.timezone import ensure_aware, format_datetime, utcnow
from app.packages.onboarding.crud.attachment import attachment_crud
from app.packages.onboarding.crud.onboarding import onboarding_crud
from app.packages.onboarding.models.attachment import ProductSetupAttachment
from app.packages.onboarding.models.onboarding import TRAINING_ADDRESS_FIELDS, Onboarding
from app.packages.onboarding.models.onboarding_manager import OnboardingManager

# 商户自行维护的字段，其余字段（账户名、入驻类型、状态）仅经理可改
MERCHANT_EDITABLE_FIELDS = (
    "delivery_address1",
    "delivery_address2",
    "delivery_city",
    "delivery_state",
    "delivery_postal_code",
    "delivery_country",
    "use_same_address_for_training",
    *(f"training_{suffix}" for suffix in TRAINING_ADDRESS_FIELDS),
    "pic_name",
    "pic_phone",
    "pic_email",
    "expected_go_live_date",
)

_TOKEN_GENERATION_ATTEMPTS = 5


def serialize_attachment(attachment: ProductSetupAttachment) -> dict[str, Any]:
    return {
        "id": attachment.id,
        "original_name": attachment.original_name,
        "cloudinary_public_id": attachment.cloudinary_public_id,
        "cloudinary_url": attachment.cloudinary_url,
        "mime_type": attachment.mime_type,
        "file_size": attachment.file_size,
        "uploaded_at": format_datetime(attachment.uploaded_at),
    }


def serialize_onboarding(record: Onboarding) -> dict[str, Any]:
    manager = record.created_by_manager
    return {
        "id": record.id,
        "account_name": record.account_name,
        "onboarding_types": record.types,
        "delivery_address1": record.delivery_address1,
        "delivery_address2": record.delivery_address2,
        "delivery_city": record.delivery_city,
        "delivery_state": record.delivery_state,
        "delivery_postal_code": record.delivery_postal_code,
        "delivery_country": record.delivery_country,
        "use_same_address_for_training": record.use_same_address_for_training,
        "training_address1": record.training_address1,
        "training_address2": record.training_address2,
        "training_city": record.training_city,
        "training_state": record.training_state,
        "training_postal_code": record.training_postal_code,
        "training_country": record.training_country,
        "pic_name": record.pic_name,
        "pic_phone": record.pic_phone,
        "pic_email": record.pic_email,
        "expected_go_live_date": (
            record.expected_go_live_date.isoformat() if record.expected_go_live_date else None
        ),
        "access_token": record.access_token,
        "token_expiry_date": format_datetime(record.token_expiry_date),
        "status": record.status,
        "product_setup_confirmed": record.product_setup_confirmed,
        "product_setup_confirmed_date": format_datetime(record.product_setup_confirmed_date),
        "terms_accepted": record.terms_accepted,
        "terms_accepted_name": record.terms_accepted_name,
        "terms_accepted_version_id": record.terms_accepted_version_id,
        "terms_accepted_at": format_datetime(record.terms_accepted_at),
        "created_by": (
            {"id": manager.id, "name": manager.name, "email": manager.email} if manager else None
        ),
        "attachments": [serialize_attachment(item) for item in record.attachments],
        "create_time": format_datetime(record.created_at),
        "update_time": format_datetime(record.updated_at),
    }


def is_token_expired(record: Onboarding, *, at: Optional[datetime] = None) -> bool:
    expiry = ensure_aware(record.token_expiry_date)
    return expiry is None or expiry <= (at or utcnow())


class OnboardingService:
    """入驻记录的业务入口，所有返回值均为统一响应结构。"""

    def _token_expiry(self) -> datetime:
        return utcnow() + timedelta(days=max(get_settings().onboarding_token_ttl_days, 1))

    def _new_unique_token(self, db: Session) -> str:
        for _ in range(_TOKEN_GENERATION_ATTEMPTS):
            token = generate_onboarding_token()
            if not onboarding_crud.token_exists(db, token):
                return token
        raise RuntimeError("Unable to generate a unique onboarding token")

    def _get_or_404(self, db: Session, onboarding_id: str) -> Onboarding:
        record = onboarding_crud.get(db, onboarding_id)
        if record is None:
            raise AppException(msg="入驻记录不存在", code=HTTP_STATUS_NOT_FOUND)
        return record

    def get_by_token_or_404(self, db: Session, token: str) -> Onboarding:
        record = onboarding_crud.get_by_token(db, (token or "").strip().upper())
        if record is None:
            raise AppException(msg="访问令牌无效", code=HTTP_STATUS_NOT_FOUND)
        return record

    def _apply_fields(self, record: Onboarding, values: dict[str, Any]) -> None:
        types = values.pop("onboarding_types", None)
        if types is not None:
            record.types = [getattr(item, "value", item) for item in types]
        for key, value in values.items():
            if hasattr(record, key):
                setattr(record, key, value)
        if record.use_same_address_for_training:
            record.copy_delivery_to_training()

    def create(self, db: Session, *, manager: OnboardingManager, payload: dict[str, Any]) -> dict:
        """新建入驻记录：生成唯一访问令牌与过期时间，初始状态为 ``created``。"""
        record = Onboarding(
            access_token=self._new_unique_token(db),
            token_expiry_date=self._token_expiry(),
            status=OnboardingStatusEnum.CREATED.value,
            created_by_manager_id=manager.id,
        )
        self._apply_fields(record, dict(payload))
        onboarding_crud.save(db, record)
        logger.info("Onboarding %s created by %s for %s", record.id, manager.email, record.account_name)
        return create_response("创建入驻记录成功", serialize_onboarding(self._get_or_404(db, record.id)))

    def list_all(self, db: Session) -> dict:
        records = onboarding_crud.list_all(db)
        return create_response("获取入驻记录成功", [serialize_onboarding(item) for item in records])

    def list_mine(self, db: Session, *, manager: OnboardingManager) -> dict:
        records = onboarding_crud.list_by_manager(db, manager.id)
        return create_response("获取入驻记录成功", [serialize_onboarding(item) for item in records])

    def get_detail(self, db: Session, onboarding_id: str) -> dict:
        return create_response("获取入驻记录成功", serialize_onboarding(self._get_or_404(db, onboarding_id)))

    def update(self, db: Session, onboarding_id: str, payload: dict[str, Any]) -> dict:
        record = self._get_or_404(db, onboarding_id)
        self._apply_fields(record, dict(payload))
        onboarding_crud.save(db, record)
        return create_response("更新入驻记录成功", serialize_onboarding(record))

    def update_status(self, db: Session, onboarding_id: str, status: OnboardingStatusEnum) -> dict:
        record = self._get_or_404(db, onboarding_id)
        previous = record.status
        record.status = status.value
        onboarding_crud.save(db, record)
        logger.info("Onboarding %s status %s -> %s", record.id, previous, record.status)
        return create_response("更新状态成功", serialize_onboarding(record))

    def regenerate_token(self, db: Session, onboarding_id: str) -> dict:
        record = self._get_or_404(db, onboarding_id)
        self._rotate_token(db, record)
        return create_response("重新生成访问令牌成功", serialize_onboarding(record))

    def list_attachments(self, db: Session, onboarding_id: str) -> dict:
        record = self._get_or_404(db, onboarding_id)
        attachments = attachment_crud.list_by_onboarding(db, record.id)
        return create_response("获取附件列表成功", [serialize_attachment(item) for item in attachments])

    def _rotate_token(self, db: Session, record: Onboarding) -> None:
        old_token = record.access_token
        record.access_token = self._new_unique_token(db)
        record.token_expiry_date = self._token_expiry()
        onboarding_crud.save(db, record)
        logger.info("Onboarding %s token rotated %s -> %s", record.id, old_token, record.access_token)

    # ---- 商户侧 ----

    def access_by_token(self, db: Session, token: str) -> dict:
        """商户打开链接：令牌过期时自动轮换并返回新令牌，前端据此更新地址栏。"""
        record = self.get_by_token_or_404(db, token)
        if is_token_expired(record):
            self._rotate_token(db, record)
        return create_response("获取入驻记录成功", serialize_onboarding(record))

    def check_token(self, db: Session, token: str) -> dict:
        record = onboarding_crud.get_by_token(db, (token or "").strip().upper())
        expired = record is None or is_token_expired(record)
        return create_response("校验访问令牌成功", {"expired": expired}, HTTP_STATUS_OK)

    def get_active_record_by_token(self, db: Session, token: str) -> Onboarding:
        """商户写操作要求令牌未过期，过期时需先通过访问接口换取新令牌。"""
        record = self.get_by_token_or_404(db, token)
        if is_token_expired(record):
            raise AppException(msg="访问令牌已过期", code=HTTP_STATUS_BAD_REQUEST)
        return record

    def merchant_update(self, db: Session, token: str, payload: dict[str, Any]) -> dict:
        record = self.get_active_record_by_token(db, token)
        values = {key: value for key, value in payload.items() if key in MERCHANT_EDITABLE_FIELDS}
        self._apply_fields(record, values)
        if record.status == OnboardingStatusEnum.CREATED.value:
            record.status = OnboardingStatusEnum.IN_PROGRESS.value
        onboarding_crud.save(db, record)
        return create_response("更新入驻信息成功", serialize_onboarding(record))


onboarding_service = OnboardingService()
