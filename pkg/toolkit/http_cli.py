import time
from dataclasses import dataclass
from typing import Any

import httpx

from pkg.logger import logger

# 错误响应体只截取前一段写入 error，避免整页 HTML 进入日志
_ERROR_EXCERPT_LIMIT = 256

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@dataclass
class RequestResult:
    """一次 HTTP 调用的结果

    网络层异常不抛出，status_code=0 并在 error 中描述原因。
    """

    status_code: int | None = None
    response: httpx.Response | None = None
    error: str | None = None
    elapsed: float = 0.0

    @property
    def success(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    @property
    def content(self) -> bytes:
        """原始响应体，字符集由调用方按协议解码"""
        if self.response is None:
            return b""
        return self.response.content


def _error_excerpt(response: httpx.Response) -> str:
    try:
        text = response.text
    except (UnicodeDecodeError, LookupError) as e:
        logger.warning(f"Failed to decode error body: {e!r}")
        return f"HTTP {response.status_code}"
    text = text.strip()
    if len(text) > _ERROR_EXCERPT_LIMIT:
        text = text[:_ERROR_EXCERPT_LIMIT] + "..."
    return f"HTTP {response.status_code}: {text}" if text else f"HTTP {response.status_code}"


class AsyncHttpClient:
    """
    基于 httpx.AsyncClient 的长连接客户端，主要用于开放平台网关的表单请求。

    - 2xx: success=True
    - 4xx/5xx: status_code 为实际状态码，error 为 "HTTP <code>: <响应摘要>"
    - 超时/连接失败: status_code=0，error 以 "Network Error" 开头
    """

    def __init__(
        self,
        base_url: str = "",
        timeout: float = 15,
        headers: dict[str, str] | None = None,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.timeout = timeout
        self.default_headers = headers or {}
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=self.default_headers,
            verify=verify,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> RequestResult:
        method = method.upper()
        url = url.strip()
        start = time.perf_counter()

        try:
            response = await self.client.request(
                method=method,
                url=url,
                params=params,
                data=data,
                headers=headers,
                timeout=timeout or self.timeout,
            )
        except httpx.TimeoutException as exc:
            logger.error(f"{method} {url} timed out: {exc!r}")
            return RequestResult(status_code=0, error=f"Network Error: timeout ({exc!r})", elapsed=time.perf_counter() - start)
        except httpx.RequestError as exc:
            logger.error(f"{method} {url} failed: {exc!r}")
            return RequestResult(status_code=0, error=f"Network Error: {exc!r}", elapsed=time.perf_counter() - start)

        elapsed = time.perf_counter() - start
        logger.info(f"{method} {url} -> {response.status_code} in {elapsed:.3f}s")

        error = _error_excerpt(response) if response.is_error else None
        return RequestResult(status_code=response.status_code, response=response, error=error, elapsed=elapsed)

    async def post_form(self, url: str, form: dict[str, Any], **kwargs) -> RequestResult:
        """以 application/x-www-form-urlencoded 提交表单"""
        headers = {"Content-Type": FORM_CONTENT_TYPE, **(kwargs.pop("headers", None) or {})}
        return await self.request("POST", url, data=form, headers=headers, **kwargs)
