"""配置管理"""

from pathlib import Path
from typing import Optional, List
from pydantic import BaseModel, SecretStr, Field
import yaml


class DebugConfig(BaseModel):
    """调试配置"""
    verbose: bool = False
    log_level: str = "INFO"
    log_file: Optional[str] = None


class ServiceConfig(BaseModel):
    """云服务端点配置"""
    base_url: str = ""
    token: Optional[SecretStr] = None
    accepted_namespaces: List[str] = Field(default_factory=list)
    request_timeout: float = 30.0
    verify_ssl: bool = True


class PollingConfig(BaseModel):
    """状态轮询配置"""
    interval: float = 10.0  # 两次轮询之间的休眠秒数
    max_timeout: float = 3600.0  # wait_for 默认超时


class TransportRetryConfig(BaseModel):
    """传输层重试配置"""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0


class Config(BaseModel):
    """主配置"""
    debug: DebugConfig = Field(default_factory=DebugConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    retry: TransportRetryConfig = Field(default_factory=TransportRetryConfig)


def load_config(config_path: Optional[str] = None) -> Config:
    """加载配置文件"""
    if config_path is None:
        # 默认配置路径
        default_paths = [
            Path("config/config.yaml"),
            Path("config/config.local.yaml"),
        ]
        for path in default_paths:
            if path.exists():
                config_path = str(path)
                break

    if config_path and Path(config_path).exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return Config(**data)

    # 返回默认配置
    return Config()


def save_config_template(output_path: str = "config/config.example.yaml"):
    """保存配置模板"""
    config = Config()
    data = config.model_dump(mode="json")

    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True)


# 全局配置实例
_config: Optional[Config] = None


def get_config() -> Config:
    """获取全局配置，未初始化时使用默认配置"""
    global _config
    if _config is None:
        _config = Config()
    return _config


def init_config(config: Optional[Config] = None, config_path: Optional[str] = None) -> Config:
    """初始化全局配置

    Args:
        config: 已构建的配置对象，优先使用
        config_path: 配置文件路径，config 为空时从文件加载

    Returns:
        全局配置实例
    """
    global _config
    _config = config if config is not None else load_config(config_path)
    return _config
