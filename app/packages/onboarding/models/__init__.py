"""模型包初始化，便于统一导入 ORM 实体并触发模型注册。"""

from app.packages.onboarding.models.attachment import ProductSetupAttachment
from app.packages.onboarding.models.base import Base
from app.packages.onboarding.models.onboarding import Onboarding
from app.packages.onboarding.models.onboarding_manager import OnboardingManager
from app.packages.onboarding.models.terms_conditions import TermsConditions

__all__ = [
    "Base",
    "Onboarding",
    "OnboardingManager",
    "ProductSetupAttachment",
    "TermsConditions",
]
