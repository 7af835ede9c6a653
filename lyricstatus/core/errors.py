"""
错误分类 - 歌词状态监视器的异常体系

- ConfigurationError: 致命，进入监视循环之前退出
- TransientFetchError: 播放/歌词获取失败，仅影响当前 tick
- AuthError: 凭据缺失或刷新失败，播放客户端把它当作一次获取失败
- NotificationPushError: 状态推送失败，记录日志后继续
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """错误分类枚举"""
    CONFIGURATION_ERROR = "configuration"  # 配置缺失
    FETCH_ERROR = "fetch"                  # 播放或歌词获取失败
    AUTH_ERROR = "auth"                    # 凭据过期或刷新失败
    NOTIFICATION_ERROR = "notification"    # 状态推送失败


class LyricStatusError(Exception):
    """歌词状态监视器异常基类"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        recoverable: bool = True,
        **context
    ):
        """
        初始化异常

        Args:
            message: 错误消息
            category: 错误分类
            recoverable: 下一个 tick 是否可能自行恢复
            **context: 额外的上下文信息
        """
        super().__init__(message)
        self.category = category
        self.recoverable = recoverable
        self.context = context


class ConfigurationError(LyricStatusError):
    """必需的配置（例如 Spotify 凭据）缺失"""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(
            message,
            ErrorCategory.CONFIGURATION_ERROR,
            recoverable=False,
            key=key
        )
        self.key = key


class TransientFetchError(LyricStatusError):
    """播放状态或歌词获取失败"""

    def __init__(self, message: str, status: Optional[int] = None, **context):
        super().__init__(message, ErrorCategory.FETCH_ERROR, status=status, **context)
        self.status = status


class AuthError(LyricStatusError):
    """没有可用的访问令牌，或者刷新令牌失败"""

    def __init__(self, message: str, **context):
        super().__init__(message, ErrorCategory.AUTH_ERROR, **context)


class NotificationPushError(LyricStatusError):
    """推送状态到外部展示服务失败"""

    def __init__(self, message: str, status: Optional[int] = None, **context):
        super().__init__(message, ErrorCategory.NOTIFICATION_ERROR, status=status, **context)
        self.status = status
