"""条款与细则相关的请求与响应模型。"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from app.packages.onboarding.api.v1.schemas.common import ResponseEnvelope


class TermsCreateRequest(BaseModel):
    version: str = Field(..., min_length=1, max_length=20, description="版本号")
    content: str = Field(..., min_length=1, description="条款正文")
    effective_date: Optional[datetime] = None

    @model_validator(mode="after")
    def _trim_fields(self) -> "TermsCreateRequest":
        self.version = self.version.strip()
        if not self.version:
            raise ValueError("版本号不能为空")
        return self


class TermsUpdateRequest(BaseModel):
    content: str = Field(..., min_length=1)


class TermsAcknowledgeRequest(BaseModel):
    """商户确认条款，兼容前端的 ``termsVersionId`` 字段名。"""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255, description="确认人姓名")
    terms_version_id: str = Field(..., alias="termsVersionId", min_length=1)

    @model_validator(mode="after")
    def _trim_name(self) -> "TermsAcknowledgeRequest":
        self.name = self.name.strip()
        if not self.name:
            raise ValueError("确认人姓名不能为空")
        return self


class TermsItem(BaseModel):
    id: str
    version: str
    content: str
    is_active: bool
    effective_date: Optional[str] = None
    create_time: Optional[str] = None


class TermsCheckData(BaseModel):
    accepted: bool
    accepted_name: Optional[str] = None
    accepted_version_id: Optional[str] = None
    accepted_at: Optional[str] = None
    active_terms: Optional[TermsItem] = None


TermsResponse = ResponseEnvelope[TermsItem]
TermsListResponse = ResponseEnvelope[List[TermsItem]]
TermsCheckResponse = ResponseEnvelope[TermsCheckData]
