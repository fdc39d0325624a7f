"""入驻记录相关的请求与响应模型。"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.packages.onboarding.api.v1.schemas.common import ResponseEnvelope
from app.packages.onboarding.core.enums import OnboardingStatusEnum, OnboardingTypeEnum


class TrainingAddressFields(BaseModel):
    use_same_address_for_training: Optional[bool] = None
    training_address1: Optional[str] = Field(default=None, max_length=255)
    training_address2: Optional[str] = Field(default=None, max_length=255)
    training_city: Optional[str] = Field(default=None, max_length=100)
    training_state: Optional[str] = Field(default=None, max_length=100)
    training_postal_code: Optional[str] = Field(default=None, max_length=20)
    training_country: Optional[str] = Field(default=None, max_length=100)


class OnboardingCreateRequest(TrainingAddressFields):
    """经理新建入驻记录时填写的信息。"""

    account_name: str = Field(..., min_length=1, max_length=255, description="商户账户名")
    onboarding_types: List[OnboardingTypeEnum] = Field(..., min_length=1, description="入驻服务类型")
    delivery_address1: str = Field(..., min_length=1, max_length=255)
    delivery_address2: Optional[str] = Field(default=None, max_length=255)
    delivery_city: str = Field(..., min_length=1, max_length=100)
    delivery_state: str = Field(..., min_length=1, max_length=100)
    delivery_postal_code: str = Field(..., min_length=1, max_length=20)
    delivery_country: str = Field(default="Malaysia", max_length=100)
    use_same_address_for_training: bool = False
    pic_name: str = Field(..., min_length=1, max_length=100, description="联系人姓名")
    pic_phone: str = Field(..., min_length=1, max_length=50)
    pic_email: EmailStr
    expected_go_live_date: Optional[date] = None

    @model_validator(mode="after")
    def _trim_fields(self) -> "OnboardingCreateRequest":
        self.account_name = self.account_name.strip()
        if not self.account_name:
            raise ValueError("商户账户名不能为空")
        return self


class OnboardingUpdateRequest(TrainingAddressFields):
    """部分更新：仅提交需要修改的字段。"""

    account_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    onboarding_types: Optional[List[OnboardingTypeEnum]] = None
    delivery_address1: Optional[str] = Field(default=None, max_length=255)
    delivery_address2: Optional[str] = Field(default=None, max_length=255)
    delivery_city: Optional[str] = Field(default=None, max_length=100)
    delivery_state: Optional[str] = Field(default=None, max_length=100)
    delivery_postal_code: Optional[str] = Field(default=None, max_length=20)
    delivery_country: Optional[str] = Field(default=None, max_length=100)
    pic_name: Optional[str] = Field(default=None, max_length=100)
    pic_phone: Optional[str] = Field(default=None, max_length=50)
    pic_email: Optional[EmailStr] = None
    expected_go_live_date: Optional[date] = None


class MerchantUpdateRequest(TrainingAddressFields):
    """商户通过访问令牌可修改的字段。"""

    delivery_address1: Optional[str] = Field(default=None, max_length=255)
    delivery_address2: Optional[str] = Field(default=None, max_length=255)
    delivery_city: Optional[str] = Field(default=None, max_length=100)
    delivery_state: Optional[str] = Field(default=None, max_length=100)
    delivery_postal_code: Optional[str] = Field(default=None, max_length=20)
    delivery_country: Optional[str] = Field(default=None, max_length=100)
    pic_name: Optional[str] = Field(default=None, max_length=100)
    pic_phone: Optional[str] = Field(default=None, max_length=50)
    pic_email: Optional[EmailStr] = None
    expected_go_live_date: Optional[date] = None


class OnboardingStatusUpdateRequest(BaseModel):
    status: OnboardingStatusEnum


class AttachmentItem(BaseModel):
    id: str
    original_name: str
    cloudinary_public_id: str
    cloudinary_url: str
    mime_type: str
    file_size: int
    uploaded_at: Optional[str] = None


class OnboardingItem(BaseModel):
    id: str
    account_name: str
    onboarding_types: List[str]
    delivery_address1: str
    delivery_address2: Optional[str] = None
    delivery_city: str
    delivery_state: str
    delivery_postal_code: str
    delivery_country: str
    use_same_address_for_training: bool
    training_address1: Optional[str] = None
    training_address2: Optional[str] = None
    training_city: Optional[str] = None
    training_state: Optional[str] = None
    training_postal_code: Optional[str] = None
    training_country: Optional[str] = None
    pic_name: str
    pic_phone: str
    pic_email: str
    expected_go_live_date: Optional[str] = None
    access_token: str
    token_expiry_date: Optional[str] = None
    status: str
    product_setup_confirmed: bool
    product_setup_confirmed_date: Optional[str] = None
    terms_accepted: bool
    terms_accepted_name: Optional[str] = None
    terms_accepted_version_id: Optional[str] = None
    terms_accepted_at: Optional[str] = None
    created_by: Optional[Dict[str, Any]] = None
    attachments: List[AttachmentItem] = Field(default_factory=list)
    create_time: Optional[str] = None
    update_time: Optional[str] = None


class TokenCheckData(BaseModel):
    expired: bool


OnboardingResponse = ResponseEnvelope[OnboardingItem]
OnboardingListResponse = ResponseEnvelope[List[OnboardingItem]]
AttachmentListResponse = ResponseEnvelope[List[AttachmentItem]]
TokenCheckResponse = ResponseEnvelope[TokenCheckData]
