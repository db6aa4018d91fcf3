"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责映射为HTTP响应，领域层不反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        # 显式HTTP状态码；为None时由异常处理器根据业务码映射
        self.status_code = status_code
        super().__init__(self.message)


class ValidationException(BusinessException):
    """参数缺失或格式错误（客户端错误）"""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_MISSING,
            message=message,
            error_type="ValidationError",
            details=details,
            field=field,
            status_code=400,
        )


class ConfigurationException(BusinessException):
    """服务端缺少必要配置

    对外只返回通用提示，具体配置项仅记录在日志中
    """

    def __init__(self, setting: str | None = None):
        super().__init__(
            code=BusinessCode.CONFIGURATION_ERROR,
            message="Server configuration error",
            error_type="ConfigurationError",
            details={"setting": setting} if setting else None,
            status_code=500,
        )


class UpstreamException(BusinessException):
    """远端交易服务调用失败或返回非成功状态"""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        provider: str = "paystack",
        details: Optional[dict] = None,
    ):
        full_details = {"provider": provider}
        if details:
            full_details.update(details)
        super().__init__(
            code=BusinessCode.UPSTREAM_ERROR,
            message=message,
            error_type="UpstreamError",
            details=full_details,
            status_code=status_code,
        )


class ParseException(BusinessException):
    """持久化数据无法解析

    调用方降级为空状态或默认状态，不向用户暴露该错误
    """

    def __init__(self, message: str, *, raw: str | None = None):
        super().__init__(
            code=BusinessCode.STORED_STATE_INVALID,
            message=message,
            error_type="ParseError",
            details={"raw": raw[:200]} if raw else None,
        )
