"""ASGI 中间件：请求 ID 注入、未分类异常兜底与接口限流。"""
