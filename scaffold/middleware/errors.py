"""未分类异常兜底中间件。

位于请求 ID 中间件之内：路由、依赖或内层中间件抛出的未预料异常在这里被翻译为
标准失败信封，堆栈只记录一次，异常不再向服务器继续传播。
"""

from __future__ import annotations

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from scaffold.core.exceptions import render_envelope, translate_exception
from scaffold.core.logger import logger


class UnhandledErrorMiddleware:
    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking_start(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking_start)
        except Exception as exc:
            envelope = translate_exception(exc, context=f"{scope.get('method')} {scope.get('path')}")
            if response_started:
                # 响应头已发出，只能中断连接
                logger.warning("Response already started, envelope for %s dropped", scope.get("path"))
                return
            response = render_envelope(envelope)
            await response(scope, receive, send)
