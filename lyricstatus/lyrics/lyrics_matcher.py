"""歌词行匹配 - 根据播放位置找出当前应显示的歌词行"""

import logging
from typing import Optional
from dataclasses import dataclass

from .lyrics_parser import LyricLine, LyricsTimeline


@dataclass(frozen=True)
class LineChange:
    """当前歌词行发生变化"""
    index: int
    line: LyricLine

    @property
    def text(self) -> str:
        return self.line.text


class TimelineMatcher:
    """
    歌词时间轴匹配器

    按顺序线性扫描，第一个满足 start_time <= position < end_time 的行
    即为当前行。位置不在任何区间内（间隙、第一行之前、最后一行结束之后）
    时不产生事件，上一次的当前行保持不变。
    """

    def __init__(self):
        self.logger = logging.getLogger("lyricstatus.lyrics.lyrics_matcher")

    def find_active_index(self, timeline: LyricsTimeline, progress_ms: int) -> int:
        """
        查找包含播放位置的歌词行索引

        Args:
            timeline: 歌词时间轴
            progress_ms: 当前播放位置（毫秒）

        Returns:
            行索引，如果没有行包含该位置则返回-1
        """
        for index, line in enumerate(timeline):
            if line.contains(progress_ms):
                return index
        return -1

    def match(
        self,
        timeline: LyricsTimeline,
        progress_ms: int,
        current_index: int
    ) -> Optional[LineChange]:
        """
        匹配当前播放位置

        Args:
            timeline: 歌词时间轴
            progress_ms: 当前播放位置（毫秒）
            current_index: 上一次显示的行索引，-1 表示尚未显示

        Returns:
            行发生变化时返回 LineChange，否则返回None
        """
        index = self.find_active_index(timeline, progress_ms)

        if index < 0:
            # 间隙中保持上一行
            return None

        if index == current_index:
            return None

        self.logger.debug(f"歌词行切换: {current_index} -> {index} @ {progress_ms}ms")
        return LineChange(index=index, line=timeline[index])
