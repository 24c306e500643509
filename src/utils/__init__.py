"""工具模块"""

from .logger import setup_logger, setup_logger_from_config, get_logger
from .retry import with_retry, RetryConfig
from .config import (
    load_config,
    get_config,
    init_config,
    Config,
    ServiceConfig,
    PollingConfig,
    TransportRetryConfig,
)

__all__ = [
    "setup_logger",
    "setup_logger_from_config",
    "get_logger",
    "with_retry",
    "RetryConfig",
    "load_config",
    "get_config",
    "init_config",
    "Config",
    "ServiceConfig",
    "PollingConfig",
    "TransportRetryConfig",
]
