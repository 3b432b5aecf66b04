"""应用入口：负责创建 FastAPI 实例并挂载中间件、异常处理与路由。"""

from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from scaffold.api.v1 import api_router
from scaffold.core.config import Settings, get_settings
from scaffold.core.exceptions import (
    AppException,
    fault_exception_handler,
    request_validation_exception_handler,
)
from scaffold.core.logger import logger, setup_logging
from scaffold.core.rate_limit import build_rate_limiter
from scaffold.core.responses import success
from scaffold.core.snowflake import SnowflakeIdGenerator
from scaffold.db.init_db import init_db
from scaffold.middleware.errors import UnhandledErrorMiddleware
from scaffold.middleware.rate_limit import RateLimitMiddleware
from scaffold.middleware.request_id import RequestIdMiddleware


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=settings.project_name, debug=settings.debug)

    # 进程内唯一的 ID 生成器，经由 get_id_generator 依赖注入
    app.state.id_generator = SnowflakeIdGenerator(
        worker_id=settings.snowflake_worker_id,
        datacenter_id=settings.snowflake_datacenter_id,
    )
    app.state.settings = settings

    # 后添加的中间件位于外层：请求 ID 最先注入，CORS 预检不计入限流，
    # 未分类异常在请求 ID 与 CORS 之内兜底，不再抛给服务器
    app.add_middleware(
        RateLimitMiddleware,
        limiter=build_rate_limiter(settings),
        exempt_prefixes=settings.rate_limit_exempt_prefixes,
    )
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestIdMiddleware)

    app.add_exception_handler(AppException, fault_exception_handler)
    app.add_exception_handler(StarletteHTTPException, fault_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)

    @app.on_event("startup")
    async def startup_event() -> None:
        """初始化数据库状态，确认服务可用后输出成功日志。"""
        init_db()
        logger.info("SUCCESS - Application running at http://127.0.0.1:%s", settings.app_port)

    @app.get("/health")
    async def health_check() -> dict:
        """提供健康检查接口，便于编排器与监控系统探活。"""
        return success({"status": "healthy"}).model_dump()

    app.include_router(api_router, prefix=settings.api_v1_str)
    return app


setup_logging()
app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=get_settings().app_port, log_config=None)
