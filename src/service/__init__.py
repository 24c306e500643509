"""云服务客户端模块"""

from .base import ServiceClient, ServiceResponse
from .http import HttpServiceClient

__all__ = [
    "ServiceClient",
    "ServiceResponse",
    "HttpServiceClient",
]
