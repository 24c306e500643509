"""云服务客户端基类"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Optional, Set


@dataclass
class ServiceResponse:
    """服务端响应"""
    status_code: int
    body: str = ""
    headers: Dict[str, str] = field(default_factory=dict)


class ServiceClient(ABC):
    """服务客户端基类

    负责认证、签名和发送请求，并持有资源集合的基础 URL。
    资源句柄只通过这里定义的方法访问网络。
    """

    @abstractmethod
    def base_url(self) -> str:
        """资源集合的基础 URL"""
        pass

    @abstractmethod
    def request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        body: str = "",
    ) -> ServiceResponse:
        """发送请求并返回响应"""
        pass

    @abstractmethod
    def accepted_namespaces(self) -> Set[str]:
        """服务接受的扩展属性命名空间"""
        pass
