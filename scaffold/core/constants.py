"""常量定义：集中维护响应码与通用提示文案。"""

HTTP_STATUS_OK = 200
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_CONFLICT = 409
HTTP_STATUS_TOO_MANY_REQUESTS = 429
HTTP_STATUS_INTERNAL_ERROR = 500

SUCCESS_MESSAGE = "成功"
FALLBACK_FAILURE_MESSAGE = "操作失败"
GENERIC_ERROR_MESSAGE = "系统异常，请稍后重试"
RATE_LIMITED_MESSAGE = "请求过于频繁，请稍后重试"

REQUEST_ID_HEADER = "X-Request-ID"
