"""API v1 汇总路由：统一挂载所有版本化的子路由。"""

from fastapi import APIRouter

from scaffold.api.v1.endpoints import users

api_router = APIRouter()
api_router.include_router(users.router)
