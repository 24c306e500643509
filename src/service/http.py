"""基于 requests 的服务客户端"""

from typing import Dict, Optional, Set

import requests
from loguru import logger

from .base import ServiceClient, ServiceResponse
from ..compute.errors import TransportError
from ..utils.config import Config, ServiceConfig, TransportRetryConfig, get_config
from ..utils.retry import RetryConfig, with_retry


class HttpServiceClient(ServiceClient):
    """HTTP 服务客户端

    功能：
    - 附加 Bearer Token 和 JSON 请求头
    - 连接失败/超时按指数退避重试
    - 不根据状态码抛异常，状态码交给资源句柄判断
    """

    def __init__(
        self,
        config: ServiceConfig,
        retry: Optional[TransportRetryConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        if not config.base_url:
            raise ValueError("未配置服务地址: base_url")

        self.config = config
        self.session = session or requests.Session()
        self._namespaces = set(config.accepted_namespaces)

        retry = retry or TransportRetryConfig()
        self._send = with_retry(RetryConfig(
            max_retries=retry.max_retries,
            base_delay=retry.base_delay,
            max_delay=retry.max_delay,
            retryable_exceptions=(requests.ConnectionError, requests.Timeout),
        ))(self._send_once)

    @classmethod
    def from_config(
        cls,
        config: Optional[Config] = None,
        session: Optional[requests.Session] = None,
    ) -> "HttpServiceClient":
        """根据全局配置（或传入的 Config）创建客户端"""
        config = config or get_config()
        return cls(config.service, config.retry, session=session)

    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def accepted_namespaces(self) -> Set[str]:
        return set(self._namespaces)

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.config.token is not None:
            headers["Authorization"] = f"Bearer {self.config.token.get_secret_value()}"
        return headers

    def _send_once(self, method: str, url: str, headers: Dict[str, str], body: str) -> requests.Response:
        return self.session.request(
            method,
            url,
            headers=headers,
            data=body.encode("utf-8") if body else None,
            timeout=self.config.request_timeout,
            verify=self.config.verify_ssl,
        )

    def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: str = "",
    ) -> ServiceResponse:
        merged = self._default_headers()
        merged.update(headers or {})

        logger.debug(f"{method} {url}")
        try:
            resp = self._send(method, url, merged, body)
        except requests.RequestException as e:
            raise TransportError(f"请求失败 {method} {url}: {e}") from e

        logger.debug(f"  → {resp.status_code} ({len(resp.content)} bytes)")
        return ServiceResponse(
            status_code=resp.status_code,
            body=resp.text,
            headers=dict(resp.headers),
        )

    def close(self):
        """关闭底层会话"""
        self.session.close()
