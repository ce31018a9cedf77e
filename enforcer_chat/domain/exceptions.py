"""统一业务异常模型。

所有跨模块抛出的业务级错误都继承自 BusinessError，
便于在会话层（ChatSession）统一捕获并转换成一条用户可读提示。
"""


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "MISSING_API_KEY"）。
        message: 用户可读错误信息，保证非空。
        http_status: 映射到 HTTP 时可用的状态码，默认 400。
        extra: 其他补充字段（例如 trace_id、model 等）。
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message or code
        self.http_status = http_status
        self.extra = extra
        super().__init__(self.message)


class ValidationError(BusinessError):
    """参数或配置校验失败。"""


class MissingCredentialError(BusinessError):
    """未配置 API Key，调用方不应发起任何网络请求。"""


class RequestInFlightError(BusinessError):
    """已有一轮对话在进行中。"""


class RequestFailedError(BusinessError):
    """请求失败：传输层错误、超时或非 2xx 状态码。"""


class NetworkError(RequestFailedError):
    """网络层错误，例如连接失败、超时等。"""


class ApiError(RequestFailedError):
    """Provider 返回非 2xx 状态码。"""


class RateLimitError(ApiError):
    """Provider 限流（429）。不做自动重试，由用户决定是否重发。"""


class MalformedResponseError(BusinessError):
    """响应体无法解析为 JSON。"""
