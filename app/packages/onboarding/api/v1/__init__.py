"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from app.packages.onboarding.api.v1.endpoints import auth, files, merchant_onboarding, onboarding, terms_conditions

api_router = APIRouter()
api_router.include_router(auth.router)
# 条款路由挂在 /onboarding 之下，需先于 /onboarding/{id} 注册
api_router.include_router(terms_conditions.router)
api_router.include_router(onboarding.router)
api_router.include_router(merchant_onboarding.router)
api_router.include_router(files.router)
