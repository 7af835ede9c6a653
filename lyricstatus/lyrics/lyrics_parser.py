"""同步歌词解析器 - 将 LRC 文本转换为按时间排序的歌词区间"""

import logging
import re
from typing import List, Optional, Iterator, Tuple
from dataclasses import dataclass


# 最后一行歌词没有后续时间戳时的持续时长（毫秒）
TRAILING_LINE_DURATION_MS = 5000


@dataclass(frozen=True)
class LyricLine:
    """
    单行歌词

    有效区间为左闭右开的 [start_time, end_time)，单位毫秒。
    """
    start_time: int
    end_time: int
    text: str

    def contains(self, position_ms: int) -> bool:
        """检查播放位置是否落在本行的区间内"""
        return self.start_time <= position_ms < self.end_time

    @property
    def duration(self) -> int:
        """区间长度（毫秒），时间戳重合时可能为0或负数"""
        return self.end_time - self.start_time


class LyricsTimeline:
    """
    一首歌的歌词时间轴

    行按 start_time 非递减排列，至少包含一行。
    """

    def __init__(self, lines: List[LyricLine]):
        if not lines:
            raise ValueError("歌词时间轴至少需要一行歌词")
        self._lines = tuple(lines)

    @property
    def lines(self) -> Tuple[LyricLine, ...]:
        return self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[LyricLine]:
        return iter(self._lines)

    def __getitem__(self, index: int) -> LyricLine:
        return self._lines[index]

    def __repr__(self) -> str:
        return f"LyricsTimeline({len(self._lines)} lines)"


class LyricsParser:
    """
    LRC 格式同步歌词解析器

    只处理行级时间戳 ``[mm:ss.xx]`` / ``[mm:ss.xxx]``，
    不匹配的记录（元数据标签、纯文本等）直接忽略。
    """

    def __init__(self):
        """初始化歌词解析器"""
        self.logger = logging.getLogger("lyricstatus.lyrics.lyrics_parser")

        # LRC时间戳模式: [mm:ss.xx] 或 [mm:ss.xxx]，后面跟歌词文本
        self.line_pattern = re.compile(r'\[(\d{2}):(\d{2})\.(\d{2,3})\](.*)')

    def parse(self, synced_lyrics: Optional[str]) -> Optional[LyricsTimeline]:
        """
        将同步歌词文本解析为歌词时间轴

        每个匹配记录的结束时间是下一个匹配记录的开始时间（即使下一条记录
        文本为空），最后一个匹配记录的结束时间为开始时间加5秒。文本为空的
        记录不会生成歌词行，但它的时间戳仍然作为前一行的结束边界。

        Args:
            synced_lyrics: LRC 格式的同步歌词文本

        Returns:
            歌词时间轴，如果没有任何可显示的歌词行则返回None
        """
        if not synced_lyrics or not synced_lyrics.strip():
            self.logger.debug("提供了空歌词内容")
            return None

        records = self._match_records(synced_lyrics)
        if not records:
            self.logger.debug("歌词中没有任何带时间戳的记录")
            return None

        lines = []
        for index, (start_time, text) in enumerate(records):
            if index + 1 < len(records):
                end_time = records[index + 1][0]
            else:
                end_time = start_time + TRAILING_LINE_DURATION_MS

            # 空行只作为上一行的结束边界
            if not text:
                continue

            lines.append(LyricLine(start_time=start_time, end_time=end_time, text=text))

        if not lines:
            self.logger.debug("所有带时间戳的记录均为空行")
            return None

        self.logger.debug(f"解析了 {len(lines)} 行歌词（{len(records)} 个时间戳记录）")
        return LyricsTimeline(lines)

    def _match_records(self, synced_lyrics: str) -> List[Tuple[int, str]]:
        """
        提取所有匹配的记录

        Returns:
            (开始时间毫秒, 去除首尾空白的文本) 列表，保持原文顺序
        """
        records = []

        for raw_line in synced_lyrics.split('\n'):
            match = self.line_pattern.search(raw_line)
            if not match:
                continue

            minutes, seconds, fraction, text = match.groups()
            records.append((self.timestamp_to_ms(minutes, seconds, fraction), text.strip()))

        return records

    @staticmethod
    def timestamp_to_ms(minutes: str, seconds: str, fraction: str) -> int:
        """
        将 LRC 时间戳转换为毫秒

        小数部分先右补零到2位再截断为2位，作为百分之一秒：
        "5" -> 50, "50" -> 50, "505" -> 50。

        Args:
            minutes: 分钟
            seconds: 秒
            fraction: 小数部分

        Returns:
            毫秒数
        """
        centiseconds = int(fraction.ljust(2, '0')[:2])
        return int(minutes) * 60000 + int(seconds) * 1000 + centiseconds * 10

    @staticmethod
    def format_time(milliseconds: int) -> str:
        """
        将毫秒格式化为 MM:SS.xx

        Args:
            milliseconds: 时间（毫秒）

        Returns:
            格式化的时间字符串
        """
        total_seconds, ms = divmod(max(0, int(milliseconds)), 1000)
        minutes, secs = divmod(total_seconds, 60)
        return f"{minutes:02d}:{secs:02d}.{ms // 10:02d}"
