"""核心基础设施：配置、日志、统一响应、异常翻译、分页、校验与 ID 生成。"""
