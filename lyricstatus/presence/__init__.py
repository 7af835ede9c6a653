"""
状态展示模块 - 把当前歌词同步到 Discord 自定义状态
"""

from .discord_status import DiscordStatusClient
from .status_notifier import StatusNotifier

__all__ = [
    "DiscordStatusClient",
    "StatusNotifier"
]
