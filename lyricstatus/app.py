"""歌词状态监视器主实现"""
import asyncio
import logging
import signal
from typing import Optional, Dict, Any, List

import aiohttp

from lyricstatus.core.dependency_container import DependencyContainer
from lyricstatus.core.monitor_state import MonitorState
from lyricstatus.lyrics.lyrics_client import LrcLibClient
from lyricstatus.lyrics.lyrics_manager import LyricsManager
from lyricstatus.playback.playback_tracker import PlaybackTracker
from lyricstatus.playback.tick_scheduler import TickScheduler
from lyricstatus.presence.discord_status import DiscordStatusClient
from lyricstatus.presence.status_notifier import StatusNotifier
from lyricstatus.spotify.auth import SpotifyAuthManager
from lyricstatus.spotify.playback_client import SpotifyPlaybackClient
from lyricstatus.utils.config_manager import ConfigManager


class LyricStatusApp:
    """
    歌词状态监视器主实现类。

    - 启动时完成一次 Spotify 浏览器授权
    - 以固定周期轮询播放状态并匹配同步歌词
    - 把当前歌词行同步到 Discord 自定义状态
    - 收到中断信号后清除状态再退出
    """

    def __init__(self, config: ConfigManager, session: Optional[aiohttp.ClientSession] = None):
        """
        初始化监视器

        Args:
            config: 配置管理器
            session: 所有客户端共享的 aiohttp 会话，None 时在 run() 中创建
        """
        self.logger = logging.getLogger("lyricstatus.app")
        self.config = config
        self.session = session
        self._owns_session = session is None

        self.container: Optional[DependencyContainer] = None
        self.auth_manager: Optional[SpotifyAuthManager] = None
        self.notifier: Optional[StatusNotifier] = None
        self.tracker: Optional[PlaybackTracker] = None
        self.scheduler: Optional[TickScheduler] = None

        self._loop_signals: List[int] = []
        self._previous_handlers: Dict[int, Any] = {}

    def _register_dependencies(self) -> DependencyContainer:
        """
        注册依赖项到依赖注入容器

        定义组件间的依赖关系，确保按正确顺序初始化。
        """
        config = self.config
        timeout = config.get_request_timeout()
        container = DependencyContainer()

        def create_auth_manager() -> SpotifyAuthManager:
            return SpotifyAuthManager(
                client_id=config.get_spotify_client_id(),
                client_secret=config.get_spotify_client_secret(),
                redirect_uri=config.get_spotify_redirect_uri(),
                scopes=config.get_spotify_scopes(),
                timeout=timeout,
                session=self.session
            )

        def create_playback_client(auth_manager: SpotifyAuthManager) -> SpotifyPlaybackClient:
            return SpotifyPlaybackClient(auth_manager, timeout=timeout, session=self.session)

        def create_lyrics_client() -> LrcLibClient:
            return LrcLibClient(
                api_base=config.get_lyrics_api_base(),
                timeout=timeout,
                session=self.session
            )

        def create_lyrics_manager(lyrics_client: LrcLibClient) -> LyricsManager:
            return LyricsManager(lyrics_client, max_cache_size=config.get_lyrics_cache_size())

        def create_presence_client() -> Optional[DiscordStatusClient]:
            if not config.is_discord_enabled():
                return None
            return DiscordStatusClient(
                token=config.get_discord_token(),
                emoji=config.get_discord_emoji(),
                api_base=config.get_discord_api_base(),
                timeout=timeout,
                session=self.session
            )

        def create_status_notifier(
            monitor_state: MonitorState,
            presence_client: Optional[DiscordStatusClient]
        ) -> StatusNotifier:
            return StatusNotifier(monitor_state, presence_client, emoji=config.get_discord_emoji())

        def create_playback_tracker(
            playback_client: SpotifyPlaybackClient,
            lyrics_manager: LyricsManager,
            status_notifier: StatusNotifier,
            monitor_state: MonitorState
        ) -> PlaybackTracker:
            return PlaybackTracker(
                playback_source=playback_client,
                lyrics_manager=lyrics_manager,
                notifier=status_notifier,
                state=monitor_state
            )

        def create_tick_scheduler(playback_tracker: PlaybackTracker) -> TickScheduler:
            return TickScheduler(playback_tracker.tick, interval=config.get_poll_interval())

        # 注册依赖项（按依赖顺序）
        container.register("auth_manager", create_auth_manager)
        container.register("playback_client", create_playback_client, ["auth_manager"])
        container.register("lyrics_client", create_lyrics_client)
        container.register("lyrics_manager", create_lyrics_manager, ["lyrics_client"])
        container.register("presence_client", create_presence_client)
        container.register("monitor_state", MonitorState)
        container.register("status_notifier", create_status_notifier, ["monitor_state", "presence_client"])
        container.register(
            "playback_tracker",
            create_playback_tracker,
            ["playback_client", "lyrics_manager", "status_notifier", "monitor_state"]
        )
        container.register("tick_scheduler", create_tick_scheduler, ["playback_tracker"])

        container.validate_dependencies()
        self.logger.debug("📝 依赖项注册完成")
        return container

    def build(self) -> None:
        """使用依赖注入容器创建全部组件"""
        self.container = self._register_dependencies()

        self.auth_manager = self.container.resolve("auth_manager")
        self.notifier = self.container.resolve("status_notifier")
        self.tracker = self.container.resolve("playback_tracker")
        self.scheduler = self.container.resolve("tick_scheduler")

        self.logger.debug("✅ 核心模块初始化完成")

    async def run(self, authorize: bool = True) -> None:
        """
        运行监视器直到收到中断信号

        Args:
            authorize: 是否先执行浏览器授权握手
        """
        if self._owns_session:
            self.session = aiohttp.ClientSession()

        try:
            self.build()

            if authorize:
                await self.auth_manager.authorize()

            self._install_signal_handlers()

            self.logger.info("🎧 正在监视 Spotify 播放状态...")
            try:
                await self.scheduler.run()
            finally:
                await self.shutdown()
        finally:
            self._remove_signal_handlers()
            if self._owns_session and self.session is not None:
                await self.session.close()

    def request_stop(self) -> None:
        """请求停止（信号处理器调用）"""
        self.logger.info("🛑 正在关闭...")
        if self.scheduler is not None:
            self.scheduler.stop()

    async def shutdown(self) -> bool:
        """
        停止调度后执行最后一次清除状态推送

        最多等待 monitor.shutdown_timeout 秒。

        Returns:
            清除推送是否在超时前完成
        """
        if self.notifier is None:
            return True

        timeout = self.config.get_shutdown_timeout()
        try:
            await asyncio.wait_for(self.notifier.clear(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            self.logger.warning(f"⚠️ 清除状态超时（{timeout}s），直接退出")
            return False

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()

        def fallback_handler(signum, frame):
            loop.call_soon_threadsafe(self.request_stop)

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_stop)
                self._loop_signals.append(sig)
            except (NotImplementedError, RuntimeError):
                # Windows 事件循环不支持 add_signal_handler，改用 signal.signal
                self.logger.debug(f"事件循环不支持信号处理器，使用 signal.signal: {sig!r}")
                self._previous_handlers[sig] = signal.signal(sig, fallback_handler)

    def _remove_signal_handlers(self) -> None:
        for sig, handler in self._previous_handlers.items():
            # 由非 Python 代码安装的处理器无法恢复
            if handler is not None:
                signal.signal(sig, handler)
        self._previous_handlers.clear()

        if self._loop_signals:
            loop = asyncio.get_running_loop()
            for sig in self._loop_signals:
                loop.remove_signal_handler(sig)
            self._loop_signals.clear()

    def get_stats(self) -> Dict[str, Any]:
        """
        获取运行统计信息

        Returns:
            包含运行统计信息的字典
        """
        stats: Dict[str, Any] = {
            "presence_enabled": self.notifier is not None and self.notifier.enabled,
            "tracking": self.tracker is not None and self.tracker.state.is_tracking,
        }
        if self.scheduler is not None:
            stats.update(self.scheduler.get_stats())
        if self.notifier is not None:
            stats["pushes"] = self.notifier.push_count
            stats["push_failures"] = self.notifier.failure_count
        return stats
