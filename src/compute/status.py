"""资源状态定义"""

from enum import Enum


class ResourceStatus(str, Enum):
    """服务端常见的资源状态

    status 字段本身是服务端返回的任意字符串，这里只列出常用取值。
    """
    ACTIVE = "ACTIVE"
    BUILD = "BUILD"
    ERROR = "ERROR"
    REBOOT = "REBOOT"
    HARD_REBOOT = "HARD_REBOOT"
    PASSWORD = "PASSWORD"
    RESIZE = "RESIZE"
    VERIFY_RESIZE = "VERIFY_RESIZE"
    DELETED = "DELETED"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value
