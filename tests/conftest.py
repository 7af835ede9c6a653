"""
测试配置

提供播放源、歌词源和状态展示服务的模拟对象
"""

import logging
import os
import sys
from typing import List, Optional, Tuple
from unittest.mock import Mock

import pytest

# 添加项目根目录到路径
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from lyricstatus.core.interfaces import (  # noqa: E402
    ILyricsSource,
    IPlaybackSource,
    IPresenceService,
    PlaybackSnapshot,
)
from lyricstatus.core.monitor_state import MonitorState  # noqa: E402
from lyricstatus.utils.config_manager import ConfigManager  # noqa: E402

SAMPLE_LRC = "[00:01.50]Hello\n[00:05.00]World"


class ScriptedPlaybackSource(IPlaybackSource):
    """按顺序返回预先设定的播放结果"""

    def __init__(self, results: List[Tuple[bool, Optional[PlaybackSnapshot], Optional[str]]]):
        self.results = list(results)
        self.calls = 0

    async def get_snapshot(self):
        self.calls += 1
        if not self.results:
            return True, None, None
        return self.results.pop(0)


class StaticLyricsSource(ILyricsSource):
    """总是返回同一份歌词"""

    def __init__(self, synced_lyrics: Optional[str] = SAMPLE_LRC, success: bool = True):
        self.synced_lyrics = synced_lyrics
        self.success = success
        self.calls: List[Tuple[str, str]] = []

    async def search(self, artist, track):
        self.calls.append((artist, track))
        if not self.success:
            return False, None, "网络错误"
        return True, self.synced_lyrics, None


class RecordingPresence(IPresenceService):
    """记录所有推送，可以设置为失败"""

    def __init__(self, fail: bool = False):
        self.pushes: List[Optional[str]] = []
        self.fail = fail

    async def set_status(self, text):
        self.pushes.append(text)
        if self.fail:
            return False, "推送失败"
        return True, None


def playing(song_id: str, progress_ms: int, track: str = "Song", artist: str = "Artist"):
    """构造一个"正在播放"的结果"""
    return True, PlaybackSnapshot(song_id=song_id, progress_ms=progress_ms, track=track, artist=artist), None


def stopped():
    """构造一个"没有播放"的结果"""
    return True, None, None


@pytest.fixture
def monitor_state():
    return MonitorState()


@pytest.fixture
def presence():
    return RecordingPresence()


@pytest.fixture
def mock_config():
    """创建模拟配置管理器"""
    config = Mock(spec=ConfigManager)
    config.get_spotify_client_id.return_value = "client-id"
    config.get_spotify_client_secret.return_value = "client-secret"
    config.get_spotify_redirect_uri.return_value = "http://localhost:8888/callback"
    config.get_spotify_scopes.return_value = "user-read-playback-state"
    config.get_request_timeout.return_value = 10.0
    config.get_lyrics_api_base.return_value = "https://lrclib.net"
    config.get_lyrics_cache_size.return_value = 10
    config.is_discord_enabled.return_value = True
    config.get_discord_token.return_value = "discord-token"
    config.get_discord_emoji.return_value = "🎵"
    config.get_discord_api_base.return_value = "https://discord.com/api/v9"
    config.get_poll_interval.return_value = 0.5
    config.get_shutdown_timeout.return_value = 1.0
    return config


@pytest.fixture(autouse=True)
def setup_logging():
    """禁用日志输出以保持测试输出清洁"""
    logging.getLogger("lyricstatus").setLevel(logging.CRITICAL)
    yield
    logging.getLogger("lyricstatus").setLevel(logging.NOTSET)
