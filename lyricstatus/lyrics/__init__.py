"""
歌词模块 - 同步歌词获取、解析和行匹配

提供 LRCLIB 歌词搜索、LRC 行级时间戳解析以及按播放位置匹配当前行的功能。
"""

from .lyrics_client import LrcLibClient
from .lyrics_parser import LyricsParser, LyricLine, LyricsTimeline
from .lyrics_matcher import TimelineMatcher, LineChange
from .lyrics_manager import LyricsManager

__all__ = [
    'LrcLibClient',
    'LyricsParser',
    'LyricLine',
    'LyricsTimeline',
    'TimelineMatcher',
    'LineChange',
    'LyricsManager'
]
