"""CRUD 后端脚手架：统一响应、全局异常、分页、参数校验等基础设施。"""
