"""Discord 自定义状态客户端"""

import logging
import asyncio
from typing import Optional, Dict, Any

import aiohttp

from lyricstatus.core.errors import NotificationPushError
from lyricstatus.core.interfaces import IPresenceService, PushResult


class DiscordStatusClient(IPresenceService):
    """
    Discord 自定义状态客户端

    通过 PATCH /users/@me/settings 修改用户的 custom_status。
    需要用户令牌；discord.py 的机器人客户端无法修改用户设置，
    所以这里直接使用 aiohttp 请求 REST API。
    """

    def __init__(
        self,
        token: str,
        emoji: str = "",
        api_base: str = "https://discord.com/api/v9",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        初始化 Discord 状态客户端

        Args:
            token: Discord 用户令牌
            emoji: 状态表情名称
            api_base: API 基础地址
            timeout: 请求超时（秒）
            session: 共享的 aiohttp 会话
        """
        self.logger = logging.getLogger("lyricstatus.presence.discord")

        self.settings_api = f"{api_base.rstrip('/')}/users/@me/settings"
        self.headers = {
            "Authorization": token,
            "Content-Type": "application/json"
        }
        self.emoji = emoji
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.session = session

    def build_payload(self, text: Optional[str]) -> Dict[str, Any]:
        """
        构建请求体

        Args:
            text: 状态文本，None 表示清除

        Returns:
            请求 JSON
        """
        if not text:
            return {"custom_status": None}

        custom_status = {"text": text}
        if self.emoji:
            custom_status["emoji_name"] = self.emoji
        return {"custom_status": custom_status}

    async def set_status(self, text: Optional[str]) -> PushResult:
        """
        设置或清除自定义状态

        Args:
            text: 状态文本，None 表示清除

        Returns:
            (success, error)
        """
        payload = self.build_payload(text)

        try:
            if self.session is not None:
                await self._patch(self.session, payload)
            else:
                async with aiohttp.ClientSession(timeout=self.timeout) as session:
                    await self._patch(session, payload)
            return True, None

        except NotificationPushError as e:
            self.logger.error(f"[DISCORD ERROR] {e}")
            return False, str(e)
        except asyncio.TimeoutError:
            self.logger.error("[DISCORD ERROR] 请求超时")
            return False, "请求超时"
        except aiohttp.ClientError as e:
            self.logger.error(f"[DISCORD ERROR] 网络错误: {e}")
            return False, str(e)

    async def _patch(self, session: aiohttp.ClientSession, payload: Dict[str, Any]) -> None:
        async with session.patch(
            self.settings_api,
            json=payload,
            headers=self.headers,
            timeout=self.timeout
        ) as response:
            if response.status >= 400:
                body = await response.text()
                raise NotificationPushError(
                    f"Discord 返回状态 {response.status}: {body[:200]}",
                    status=response.status
                )
