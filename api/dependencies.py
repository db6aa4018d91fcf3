"""
API依赖项 - 网关服务的组装入口
"""
from typing import AsyncIterator

from application.services.transaction_service import TransactionQueryService
from infrastructure.external.paystack import get_transaction_gateway


async def get_transaction_service() -> AsyncIterator[TransactionQueryService]:
    """每个请求创建一个网关客户端，响应构建完成后关闭"""
    service = TransactionQueryService(gateway=get_transaction_gateway())
    try:
        yield service
    finally:
        await service.aclose()
