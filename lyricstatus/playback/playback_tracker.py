"""
播放追踪器 - 轮询状态机

每个 tick 读取一次播放状态并归类为以下四种情况之一：

- 空闲且没有播放：不做任何事
- 播放了新歌曲：重置行索引，加载歌词时间轴，没有歌词时清除状态
- 继续播放同一首歌：匹配当前歌词行，行变化时推送状态
- 播放停止：清空状态并清除展示
"""

import logging
from enum import Enum
from typing import Optional

from lyricstatus.core.interfaces import IPlaybackSource, PlaybackSnapshot
from lyricstatus.core.monitor_state import MonitorState
from lyricstatus.lyrics.lyrics_manager import LyricsManager
from lyricstatus.lyrics.lyrics_matcher import TimelineMatcher
from lyricstatus.lyrics.lyrics_parser import LyricsParser
from lyricstatus.presence.status_notifier import StatusNotifier


class TickOutcome(Enum):
    """单个 tick 的分类结果"""
    IDLE = "idle"
    NEW_SONG = "new_song"
    CONTINUING = "continuing"
    STOPPED = "stopped"


class PlaybackTracker:
    """
    播放追踪器

    持有唯一的 MonitorState，所有状态修改都发生在 tick() 中。
    """

    def __init__(
        self,
        playback_source: IPlaybackSource,
        lyrics_manager: LyricsManager,
        notifier: StatusNotifier,
        state: Optional[MonitorState] = None,
        matcher: Optional[TimelineMatcher] = None
    ):
        """
        初始化播放追踪器

        Args:
            playback_source: 播放源
            lyrics_manager: 歌词管理器
            notifier: 状态通知器
            state: 监视器状态，默认新建
            matcher: 歌词行匹配器，默认新建
        """
        self.logger = logging.getLogger("lyricstatus.playback.tracker")

        self.playback_source = playback_source
        self.lyrics_manager = lyrics_manager
        self.notifier = notifier
        self.state = state if state is not None else MonitorState()
        self.matcher = matcher or TimelineMatcher()

    async def tick(self) -> TickOutcome:
        """
        执行一次轮询

        Returns:
            本次 tick 的分类结果
        """
        success, snapshot, error = await self.playback_source.get_snapshot()
        if not success:
            # 获取失败按没有播放处理，下一个 tick 自然重试
            self.logger.debug(f"获取播放状态失败，按未播放处理: {error}")
            snapshot = None

        if snapshot is None:
            if not self.state.is_tracking:
                return TickOutcome.IDLE
            await self._handle_stop()
            return TickOutcome.STOPPED

        if snapshot.song_id != self.state.current_song_id:
            await self._handle_new_song(snapshot)
            return TickOutcome.NEW_SONG

        await self._update_line(snapshot.progress_ms)
        return TickOutcome.CONTINUING

    async def _handle_new_song(self, snapshot: PlaybackSnapshot) -> None:
        self.logger.info("=" * 50)
        self.logger.info(f"🎵 [NEW SONG] {snapshot.get_display_name()}")
        self.logger.info("=" * 50)

        self.state.start_song(snapshot.song_id)

        timeline = await self.lyrics_manager.get_timeline(snapshot.artist, snapshot.track)
        self.state.timeline = timeline

        if timeline is None:
            self.logger.info("ℹ️ 这首歌没有可用的同步歌词")
            await self.notifier.notify("")
            return

        self.logger.info(f"📜 已加载 {len(timeline)} 行歌词")
        await self._update_line(snapshot.progress_ms)

    async def _update_line(self, progress_ms: int) -> None:
        timeline = self.state.timeline
        if timeline is None:
            return

        change = self.matcher.match(timeline, progress_ms, self.state.current_line_index)
        if change is None:
            return

        self.state.current_line_index = change.index
        self.logger.info(f"♪ [{LyricsParser.format_time(change.line.start_time)}] {change.text}")
        await self.notifier.notify(change.text)

    async def _handle_stop(self) -> None:
        self.logger.info("⏹️ 播放已停止")
        self.state.stop()
        await self.notifier.notify("")
