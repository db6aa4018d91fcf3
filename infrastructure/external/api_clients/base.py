"""
REST API客户端基类

为本服务调用的JSON接口（Paystack，以及页面连接远端部署时的网关本身）提供通用功能，包括：
- 每个实例延迟创建一个 httpx.AsyncClient
- Bearer 认证与默认请求头
- 可选的瞬时故障重试（tenacity），默认关闭
- 非2xx响应与传输错误统一转换为 APIError
- 可注入 transport（测试用 MockTransport，进程内用 ASGITransport）
"""
import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.logging_config import get_logger


logger = get_logger(__name__)

RETRY_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass
class APIResponse:
    status_code: int
    headers: Dict[str, str]
    data: Any
    raw_content: bytes
    elapsed_ms: float
    reason_phrase: str = ""
    request_id: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.status_code >= 400

    def json(self) -> Any:
        """解析后的响应体；不是JSON时抛出 ValueError"""
        if self.data is not None:
            return self.data
        return json.loads(self.raw_content)

    def remote_message(self) -> Optional[str]:
        """从JSON错误响应中提取 `message`、`error` 或 `detail`"""
        if not isinstance(self.data, dict):
            return None
        for key in ("message", "error", "detail"):
            value = self.data.get(key)
            if isinstance(value, str) and value:
                return value
        return None


class APIError(Exception):
    """API调用未得到2xx响应

    完全没有收到响应时 `status_code` 为 None
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response: Optional[APIResponse] = None,
        request_id: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.response = response
        self.request_id = request_id
        super().__init__(message)

    def __str__(self):
        parts = [self.message]
        if self.status_code:
            parts.append(f"Status: {self.status_code}")
        if self.request_id:
            parts.append(f"Request ID: {self.request_id}")
        return " | ".join(parts)

    @classmethod
    def from_response(cls, response: APIResponse) -> "APIError":
        message = response.remote_message() or response.reason_phrase or f"HTTP {response.status_code}"
        return cls(message, response.status_code, response, response.request_id)


class RetryableAPIError(APIError):
    """可重试的瞬时错误（429/5xx）"""


def _log_retry(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "api_request_retry",
        attempt=state.attempt_number,
        error=str(exc) if exc else None,
    )


class BaseAPIClient:
    """子类负责暴露具体接口，并将 APIError 转换为各自的异常"""

    USER_AGENT = "paystack-transaction-lookup/1.0"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        max_retries: int = 0,
        retry_delay: float = 1.0,
        headers: Optional[Dict[str, str]] = None,
        auth_token: Optional[str] = None,
        verify_ssl: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        debug: bool = False,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.verify_ssl = verify_ssl
        self.transport = transport
        self.debug = debug

        self.default_headers = {
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }
        if headers:
            self.default_headers.update(headers)
        if auth_token:
            self.default_headers["Authorization"] = f"Bearer {auth_token}"

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: Dict[str, Any] = {"timeout": httpx.Timeout(self.timeout), "follow_redirects": True}
            if self.transport is not None:
                kwargs["transport"] = self.transport
            else:
                kwargs["verify"] = self.verify_ssl
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    async def _send_once(self, method: str, url: str, params: Optional[Dict[str, Any]], headers: Dict[str, str], **kwargs) -> APIResponse:
        started = time.perf_counter()
        raw = await self.client.request(method, url, params=params, headers=headers, **kwargs)
        data = None
        if "application/json" in raw.headers.get("content-type", ""):
            try:
                data = raw.json()
            except ValueError:
                data = None
        response = APIResponse(
            status_code=raw.status_code,
            headers=dict(raw.headers),
            data=data,
            raw_content=raw.content,
            elapsed_ms=(time.perf_counter() - started) * 1000,
            reason_phrase=raw.reason_phrase,
            request_id=raw.headers.get("x-request-id"),
        )
        if self.debug:
            logger.debug(
                "api_response",
                method=method,
                url=url,
                status_code=response.status_code,
                elapsed_ms=round(response.elapsed_ms, 1),
            )

        if response.is_error and self.max_retries > 0 and response.status_code in RETRY_STATUS_CODES:
            if response.status_code == 429:
                try:
                    retry_after = float(response.headers.get("retry-after") or 0)
                except ValueError:
                    retry_after = 0
                if retry_after:
                    await asyncio.sleep(retry_after)
            error = APIError.from_response(response)
            raise RetryableAPIError(error.message, error.status_code, response, error.request_id)
        if response.is_error:
            raise APIError.from_response(response)
        return response

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> APIResponse:
        """发送请求并返回2xx响应，否则抛出 APIError"""
        url = self._build_url(endpoint)
        request_headers = {**self.default_headers, **(headers or {})}
        if self.debug:
            logger.debug("api_request", method=method, url=url, params=params)

        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.max_retries + 1),
            wait=wait_exponential(multiplier=self.retry_delay, min=self.retry_delay, max=self.retry_delay * 8),
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError, RetryableAPIError)),
            before_sleep=_log_retry,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._send_once(method, url, params, request_headers, **kwargs)
        except RetryableAPIError as exc:
            # 重试次数用尽：以普通错误抛出并保留远端状态码
            raise APIError(exc.message, exc.status_code, exc.response, exc.request_id) from exc
        except httpx.TimeoutException as exc:
            raise APIError(f"Request timeout after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}") from exc
        raise APIError("No attempt was made")  # pragma: no cover

    async def get(self, endpoint: str, **kwargs) -> APIResponse:
        return await self._request("GET", endpoint, **kwargs)
