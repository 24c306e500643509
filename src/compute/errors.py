"""计算资源异常定义"""

from typing import Optional


class ComputeError(Exception):
    """计算资源操作的基础异常"""


class InvalidArgumentError(ComputeError, TypeError):
    """构造参数类型不受支持"""


class ResourceUrlError(ComputeError):
    """资源尚无可解析的地址"""


class ResourceIdRequiredError(ComputeError):
    """操作需要资源 ID，但 ID 为空"""


class ResourceNotFoundError(ComputeError):
    """刷新时服务端返回 404"""


class ResourceDecodeError(ComputeError, ValueError):
    """刷新响应不是合法的 JSON 文档"""


class UnknownError(ComputeError):
    """服务端返回了非预期的状态码"""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ActionError(ComputeError):
    """动作请求参数非法或服务端拒绝"""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        url: Optional[str] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.resource_type = resource_type
        self.url = url
        self.body = body


class ExtensionAttributeError(ComputeError, AttributeError):
    """扩展属性的命名空间未被服务接受"""

    def __init__(self, name: str):
        super().__init__(f"未注册命名空间的属性: {name}")
        self.name = name


class DocumentError(ComputeError):
    """资源类型未提供 JSON 信封名称"""


class TransportError(ComputeError):
    """传输层失败或返回了无法识别的响应对象"""
