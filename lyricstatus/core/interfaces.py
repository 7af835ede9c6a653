"""
核心接口定义 - 监视核心与外部服务之间的边界

播放追踪器只依赖这里的抽象接口，不直接依赖 Spotify、LRCLIB 或 Discord
的具体客户端，测试时可以直接替换为模拟对象。

所有外部调用都返回结果元组 ``(success, value, error)``，调用方根据
success 分支处理，而不是依赖异常控制流程。
"""

from abc import ABC, abstractmethod
from typing import Optional, Tuple
from dataclasses import dataclass


@dataclass(frozen=True)
class PlaybackSnapshot:
    """播放源某一时刻的播放状态，读取后立即消费，不做持久化"""
    song_id: str
    progress_ms: int
    track: str
    artist: str

    def get_display_name(self) -> str:
        """获取 "艺术家 - 歌曲" 格式的显示名称"""
        return f"{self.artist} - {self.track}"


# (success, value, error)
PlaybackResult = Tuple[bool, Optional[PlaybackSnapshot], Optional[str]]
LyricsResult = Tuple[bool, Optional[str], Optional[str]]
PushResult = Tuple[bool, Optional[str]]


class IAuthService(ABC):
    """认证服务接口 - 提供有效的访问令牌"""

    @abstractmethod
    async def get_valid_access_token(self) -> str:
        """获取有效的访问令牌，必要时自动刷新；失败时抛出 AuthError"""
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """标记当前访问令牌已失效，下次获取时强制刷新"""
        pass


class IPlaybackSource(ABC):
    """播放源接口"""

    @abstractmethod
    async def get_snapshot(self) -> PlaybackResult:
        """
        获取当前播放状态

        Returns:
            (True, snapshot, None) 正在播放；
            (True, None, None) 没有播放；
            (False, None, error) 请求失败
        """
        pass


class ILyricsSource(ABC):
    """歌词源接口"""

    @abstractmethod
    async def search(self, artist: str, track: str) -> LyricsResult:
        """
        搜索同步歌词

        Returns:
            (True, synced_text, None) 找到同步歌词；
            (True, None, None) 没有结果或没有同步歌词；
            (False, None, error) 请求失败
        """
        pass


class IPresenceService(ABC):
    """状态展示服务接口"""

    @abstractmethod
    async def set_status(self, text: Optional[str]) -> PushResult:
        """
        设置状态文本，None 表示清除状态

        Returns:
            (success, error)
        """
        pass
