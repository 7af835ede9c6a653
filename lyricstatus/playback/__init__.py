"""
播放模块 - 播放状态追踪和 tick 调度

播放追踪器负责歌曲切换、停止检测和歌词行匹配；
调度器以固定周期驱动追踪器，并保证 tick 不会重入。
"""

from .playback_tracker import PlaybackTracker, TickOutcome
from .tick_scheduler import TickScheduler

__all__ = [
    "PlaybackTracker",
    "TickOutcome",
    "TickScheduler"
]
