"""重试机制"""

import functools
import time
from dataclasses import dataclass, field
from typing import Tuple, Type, Callable, Any
from loguru import logger


@dataclass
class RetryConfig:
    """重试配置"""
    max_retries: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    exponential_base: float = 2.0
    retryable_exceptions: Tuple[Type[Exception], ...] = field(
        default_factory=lambda: (ConnectionError, TimeoutError)
    )

    def delay_for(self, attempt: int) -> float:
        """第 attempt 次失败后的等待秒数"""
        return min(self.base_delay * (self.exponential_base ** attempt), self.max_delay)


def with_retry(config: RetryConfig = None):
    """同步重试装饰器

    只重试 retryable_exceptions 中的异常，其余异常直接抛出。
    """
    if config is None:
        config = RetryConfig()

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            last_exception = None
            for attempt in range(config.max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except config.retryable_exceptions as e:
                    last_exception = e
                    if attempt < config.max_retries:
                        delay = config.delay_for(attempt)
                        logger.warning(
                            f"重试 {attempt + 1}/{config.max_retries}: {func.__name__} "
                            f"失败 ({type(e).__name__}), {delay:.1f}s 后重试"
                        )
                        time.sleep(delay)
                    else:
                        logger.error(f"重试耗尽: {func.__name__} 最终失败")
            raise last_exception
        return wrapper

    return decorator
