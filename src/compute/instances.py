"""具体的计算类资源"""

from typing import Optional

from .kinds import DATABASE_INSTANCE, SERVER
from .resource import ComputeResource


class Server(ComputeResource):
    """云服务器"""

    kind = SERVER

    def reboot(self, reboot_type: str = "SOFT"):
        """重启服务器

        Args:
            reboot_type: SOFT 或 HARD
        """
        return self.action({"reboot": {"type": reboot_type}})

    def change_password(self, password: str):
        """重置管理员密码"""
        return self.action({"changePassword": {"adminPass": password}})

    def resize(self, flavor_ref: str):
        return self.action({"resize": {"flavorRef": flavor_ref}})

    def confirm_resize(self):
        return self.action({"confirmResize": None})

    def revert_resize(self):
        return self.action({"revertResize": None})


class DatabaseInstance(ComputeResource):
    """托管数据库实例"""

    kind = DATABASE_INSTANCE

    def restart(self):
        return self.action({"restart": {}})

    def resize_volume(self, size: int):
        """调整存储卷大小（GB）"""
        return self.action({"resize": {"volume": {"size": size}}})

    def resize(self, flavor_ref: str, volume_size: Optional[int] = None):
        """调整规格，可同时调整存储卷

        存储卷和规格是两个独立的动作，不具备原子性：
        存储卷调整失败时不会发送规格调整；规格调整失败时，已完成的存储卷调整不会回滚。
        """
        if volume_size is not None and self.resize_volume(volume_size) is False:
            return False
        return self.action({"resize": {"flavorRef": flavor_ref}})
