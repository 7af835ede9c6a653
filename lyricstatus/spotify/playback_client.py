"""Spotify 播放状态客户端"""

import asyncio
import logging
from typing import Optional, Dict, Any

import aiohttp

from lyricstatus.core.errors import AuthError, TransientFetchError
from lyricstatus.core.interfaces import IAuthService, IPlaybackSource, PlaybackSnapshot, PlaybackResult

PLAYER_URL = "https://api.spotify.com/v1/me/player"


class SpotifyPlaybackClient(IPlaybackSource):
    """
    Spotify 播放状态客户端

    读取 /v1/me/player。暂停、没有活动设备（204）或没有曲目时视为未播放。
    凭据问题和网络错误都只返回失败结果，错误细节不向追踪器暴露。
    """

    def __init__(
        self,
        auth: IAuthService,
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        初始化播放状态客户端

        Args:
            auth: 认证服务
            timeout: 请求超时（秒）
            session: 共享的 aiohttp 会话
        """
        self.logger = logging.getLogger("lyricstatus.spotify.playback")
        self.auth = auth
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session

    async def get_snapshot(self) -> PlaybackResult:
        """
        获取当前播放状态

        Returns:
            (success, snapshot, error)
        """
        try:
            token = await self.auth.get_valid_access_token()
            data = await self._request_player(token)
            return True, self.parse_player_state(data), None

        except AuthError as e:
            self.logger.debug(f"Spotify 凭据不可用: {e}")
            return False, None, str(e)
        except TransientFetchError as e:
            if e.status == 401:
                # 令牌被服务端拒绝，下一个 tick 先刷新
                self.auth.invalidate()
            self.logger.debug(f"获取播放状态失败: {e}")
            return False, None, str(e)
        except asyncio.TimeoutError:
            self.logger.debug("获取播放状态超时")
            return False, None, "请求超时"
        except aiohttp.ClientError as e:
            self.logger.debug(f"获取播放状态时网络错误: {e}")
            return False, None, str(e)
        except ValueError as e:
            self.logger.debug(f"播放状态响应无效: {e}")
            return False, None, "响应不是有效的JSON"

    async def _request_player(self, token: str) -> Optional[Dict[str, Any]]:
        headers = {"Authorization": f"Bearer {token}"}

        if self.session is not None:
            return await self._fetch(self.session, headers)

        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            return await self._fetch(session, headers)

    async def _fetch(self, session: aiohttp.ClientSession, headers: Dict[str, str]) -> Optional[Dict[str, Any]]:
        async with session.get(PLAYER_URL, headers=headers, timeout=self.timeout) as response:
            if response.status == 204:
                return None
            if response.status != 200:
                raise TransientFetchError(f"Spotify 返回状态 {response.status}", status=response.status)
            return await response.json(content_type=None)

    @staticmethod
    def parse_player_state(data: Optional[Dict[str, Any]]) -> Optional[PlaybackSnapshot]:
        """
        将播放器响应转换为播放快照

        Args:
            data: /v1/me/player 的 JSON 响应

        Returns:
            正在播放时返回快照，否则返回None
        """
        if not data or not data.get("is_playing"):
            return None

        item = data.get("item")
        if not item or not item.get("id"):
            return None

        artists = item.get("artists") or []
        artist = artists[0].get("name", "") if artists else ""

        return PlaybackSnapshot(
            song_id=item["id"],
            progress_ms=int(data.get("progress_ms") or 0),
            track=item.get("name", ""),
            artist=artist
        )
