"""歌词管理器 - 协调歌词获取、解析和缓存"""

import logging
from collections import OrderedDict
from typing import Optional, Dict, Any

from lyricstatus.core.interfaces import ILyricsSource
from .lyrics_parser import LyricsParser, LyricsTimeline


class LyricsManager:
    """
    歌词管理器

    对播放追踪器只暴露一个操作：按艺术家和歌曲名获取歌词时间轴。
    获取失败和"没有歌词"在这一层不作区分，都返回None。

    只缓存解析成功的时间轴，获取失败的歌曲在下一次切歌时重新请求。
    """

    def __init__(
        self,
        lyrics_source: ILyricsSource,
        parser: Optional[LyricsParser] = None,
        max_cache_size: int = 50
    ):
        """
        初始化歌词管理器

        Args:
            lyrics_source: 歌词源
            parser: 歌词解析器，默认新建
            max_cache_size: 最大缓存条目数，0 表示禁用缓存
        """
        self.logger = logging.getLogger("lyricstatus.lyrics.lyrics_manager")

        self.lyrics_source = lyrics_source
        self.parser = parser or LyricsParser()

        self._cache: "OrderedDict[str, LyricsTimeline]" = OrderedDict()
        self.max_cache_size = max(0, max_cache_size)

        self.logger.debug("歌词管理器初始化完成")

    async def get_timeline(self, artist: str, track: str) -> Optional[LyricsTimeline]:
        """
        获取歌曲的歌词时间轴

        Args:
            artist: 艺术家名称
            track: 歌曲标题

        Returns:
            歌词时间轴，如果没有同步歌词或获取失败则返回None
        """
        cache_key = self._create_cache_key(artist, track)

        cached = self._cache.get(cache_key)
        if cached is not None:
            self.logger.debug(f"从缓存返回歌词: {artist} - {track}")
            return cached

        success, synced_lyrics, error = await self.lyrics_source.search(artist, track)
        if not success:
            self.logger.debug(f"歌词获取失败，按无歌词处理: {error}")
            return None

        if not synced_lyrics:
            return None

        timeline = self.parser.parse(synced_lyrics)
        if timeline is None:
            self.logger.debug(f"同步歌词中没有可显示的行: {artist} - {track}")
            return None

        self._cache_timeline(cache_key, timeline)
        return timeline

    def _create_cache_key(self, artist: str, track: str) -> str:
        return f"{track.strip().lower()}|{artist.strip().lower()}"

    def _cache_timeline(self, cache_key: str, timeline: LyricsTimeline) -> None:
        if self.max_cache_size == 0:
            return

        # 简单的FIFO策略
        while len(self._cache) >= self.max_cache_size:
            oldest_key, _ = self._cache.popitem(last=False)
            self.logger.debug(f"从缓存中移除最旧条目: {oldest_key}")

        self._cache[cache_key] = timeline

    def clear_cache(self) -> None:
        """清除歌词缓存"""
        self._cache.clear()
        self.logger.info("歌词缓存已清除")

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        获取缓存统计信息

        Returns:
            缓存统计字典
        """
        return {
            'cache_size': len(self._cache),
            'max_cache_size': self.max_cache_size,
            'cache_enabled': self.max_cache_size > 0,
            'cache_keys': list(self._cache.keys())
        }
