"""
Spotify 模块 - 授权和播放状态读取
"""

from .auth import SpotifyAuthManager
from .playback_client import SpotifyPlaybackClient

__all__ = [
    "SpotifyAuthManager",
    "SpotifyPlaybackClient"
]
