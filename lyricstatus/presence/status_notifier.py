"""状态通知器 - 去重后把当前歌词推送到外部状态展示服务"""

import logging
from typing import Optional

from lyricstatus.core.interfaces import IPresenceService
from lyricstatus.core.monitor_state import MonitorState


class StatusNotifier:
    """
    状态通知器

    把歌词文本转换为展示字符串（空文本表示清除状态），与上一次成功推送的
    字符串比较，相同则跳过。推送失败只记录日志，不更新 last_notified_text。

    没有配置展示服务时只输出日志。
    """

    def __init__(
        self,
        state: MonitorState,
        presence: Optional[IPresenceService] = None,
        emoji: str = ""
    ):
        """
        初始化状态通知器

        Args:
            state: 共享的监视器状态，保存 last_notified_text
            presence: 外部状态展示服务，None 表示禁用
            emoji: 状态文本前缀的表情
        """
        self.logger = logging.getLogger("lyricstatus.presence.status_notifier")
        self.state = state
        self.presence = presence
        self.emoji = emoji

        self.push_count = 0
        self.failure_count = 0

    @property
    def enabled(self) -> bool:
        return self.presence is not None

    def format_status(self, text: str) -> str:
        """
        计算展示字符串

        Args:
            text: 歌词文本，空字符串表示清除

        Returns:
            展示字符串，清除时为空字符串
        """
        if not text:
            return ""
        if self.emoji:
            return f"{self.emoji} {text}"
        return text

    async def notify(self, text: str) -> bool:
        """
        推送状态文本

        Args:
            text: 歌词文本，空字符串表示清除状态

        Returns:
            是否实际发起并成功完成了一次推送
        """
        if not self.enabled:
            if text:
                self.logger.info(f"🎤 {text}")
            return False

        status_text = self.format_status(text)
        if status_text == self.state.last_notified_text:
            return False

        self.push_count += 1
        success, error = await self.presence.set_status(status_text or None)

        if not success:
            self.failure_count += 1
            self.logger.warning(f"⚠️ 状态推送失败: {error}")
            return False

        self.state.last_notified_text = status_text

        if status_text:
            self.logger.info(f"✅ 状态已更新: {status_text}")
        else:
            self.logger.info("🧹 状态已清除")
        return True

    async def clear(self) -> bool:
        """清除状态"""
        return await self.notify("")
