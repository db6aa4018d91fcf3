"""
统一响应格式定义：{success, data?, error?}
"""
from typing import Any, Optional, Generic, TypeVar
from pydantic import BaseModel
from fastapi.responses import JSONResponse


T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """统一响应模型"""
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    def to_payload(self) -> dict:
        """序列化响应体，只保留成功或失败对应的分支

        仅导出实际赋值过的字段，透传对象保持上游原样（如 `paid_at` 的 null 原样保留）
        """
        if self.success:
            return self.model_dump(mode="json", exclude={"error"}, exclude_unset=True)
        return self.model_dump(mode="json", exclude={"data"}, exclude_unset=True)


def success_response(data: Any = None) -> Envelope:
    """
    创建成功响应

    Args:
        data: 响应数据

    Returns:
        Envelope: 成功响应对象
    """
    return Envelope(success=True, data=data)


def error_response(message: str) -> Envelope:
    """
    创建错误响应

    Args:
        message: 错误消息

    Returns:
        Envelope: 错误响应对象
    """
    return Envelope(success=False, error=message)


def envelope_json(envelope: Envelope, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope.to_payload())
