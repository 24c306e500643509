"""日志工具"""

import sys
from typing import Optional
from loguru import logger


def setup_logger(
    level: str = "INFO",
    log_file: Optional[str] = None,
    verbose: bool = False
) -> None:
    """配置日志系统"""
    # 移除默认处理器
    logger.remove()

    # 控制台格式
    if verbose:
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <7}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )
    else:
        console_format = (
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <7}</level> | "
            "<level>{message}</level>"
        )

    logger.add(
        sys.stderr,
        format=console_format,
        level=level,
        colorize=True,
    )

    # 文件处理器记录全部请求细节
    if log_file:
        logger.add(
            log_file,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name}:{function}:{line} | {message}",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
        )


def setup_logger_from_config(config) -> None:
    """根据 DebugConfig 配置日志"""
    setup_logger(
        level=config.log_level,
        log_file=config.log_file,
        verbose=config.verbose,
    )


def get_logger(name: str = "compute"):
    """获取命名的日志器"""
    return logger.bind(name=name)
