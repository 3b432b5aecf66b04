"""请求/响应模型与字段约束。"""
