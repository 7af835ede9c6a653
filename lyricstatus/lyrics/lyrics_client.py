"""LRCLIB API客户端 - 同步歌词搜索"""

import logging
import asyncio
from typing import Optional, List, Dict, Any

import aiohttp

from lyricstatus import __version__
from lyricstatus.core.errors import TransientFetchError
from lyricstatus.core.interfaces import ILyricsSource, LyricsResult


class LrcLibClient(ILyricsSource):
    """
    LRCLIB API客户端

    通过 /api/search 按艺术家和歌曲名搜索，取第一个结果的同步歌词。
    """

    def __init__(
        self,
        api_base: str = "https://lrclib.net",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        初始化 LRCLIB 客户端

        Args:
            api_base: API 基础地址
            timeout: 请求超时（秒）
            session: 共享的 aiohttp 会话，为None时每次请求创建临时会话
        """
        self.logger = logging.getLogger("lyricstatus.lyrics.lyrics_client")

        self.search_api = f"{api_base.rstrip('/')}/api/search"
        # LRCLIB 要求客户端标识自身
        self.headers = {
            "User-Agent": f"lyricstatus/{__version__} (https://github.com/lyricstatus/lyricstatus)"
        }
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session

        self.logger.debug("LRCLIB 客户端初始化完成")

    async def search(self, artist: str, track: str) -> LyricsResult:
        """
        搜索歌曲的同步歌词

        Args:
            artist: 艺术家名称
            track: 歌曲标题

        Returns:
            (success, synced_lyrics, error)
        """
        try:
            self.logger.debug(f"搜索歌词: {artist} - {track}")

            results = await self._request_search(artist, track)
            if not results:
                self.logger.debug(f"LRCLIB 没有搜索结果: {artist} - {track}")
                return True, None, None

            first = results[0]
            if not isinstance(first, dict):
                raise TransientFetchError("LRCLIB 搜索结果格式无效")

            synced_lyrics = first.get('syncedLyrics')
            if not synced_lyrics:
                self.logger.debug(f"第一个搜索结果没有同步歌词: {artist} - {track}")
                return True, None, None

            if not isinstance(synced_lyrics, str):
                raise TransientFetchError("LRCLIB syncedLyrics 不是字符串")

            return True, synced_lyrics, None

        except TransientFetchError as e:
            self.logger.warning(f"获取歌词失败: {e}")
            return False, None, str(e)
        except asyncio.TimeoutError:
            self.logger.warning(f"获取歌词超时: {artist} - {track}")
            return False, None, "请求超时"
        except aiohttp.ClientError as e:
            self.logger.error(f"获取歌词时网络错误: {e}")
            return False, None, str(e)
        except ValueError as e:
            self.logger.warning(f"歌词响应不是有效的JSON: {e}")
            return False, None, "响应不是有效的JSON"
        except (TypeError, AttributeError) as e:
            self.logger.warning(f"歌词响应结构异常: {e}")
            return False, None, "响应结构异常"

    async def _request_search(self, artist: str, track: str) -> List[Dict[str, Any]]:
        """
        发送搜索请求

        Raises:
            TransientFetchError: 状态码不是200或响应不是列表
        """
        params = {
            "artist_name": artist,
            "track_name": track
        }

        if self.session is not None:
            return await self._fetch(self.session, params)

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._fetch(session, params)

    async def _fetch(self, session: aiohttp.ClientSession, params: Dict[str, str]) -> List[Dict[str, Any]]:
        async with session.get(
            self.search_api,
            params=params,
            headers=self.headers,
            timeout=self.timeout
        ) as response:
            if response.status != 200:
                raise TransientFetchError(f"LRCLIB 返回状态 {response.status}", status=response.status)

            data = await response.json(content_type=None)

        if not isinstance(data, list):
            raise TransientFetchError("LRCLIB 响应格式无效")

        return data
