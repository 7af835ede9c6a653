"""固定周期的 tick 调度器"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional


class TickScheduler:
    """
    tick 调度器

    每隔 interval 秒触发一次 tick。上一次 tick 尚未完成时，本次触发
    直接跳过而不是排队，保证同一时间最多只有一个 tick 在修改状态。

    stop() 之后不再触发新的 tick，正在运行的 tick 会被取消。
    """

    def __init__(
        self,
        tick: Callable[[], Awaitable[object]],
        interval: float = 0.5
    ):
        """
        初始化调度器

        Args:
            tick: 每次触发时执行的协程函数
            interval: 触发周期（秒）
        """
        if interval <= 0:
            raise ValueError("tick 周期必须大于0")

        self.logger = logging.getLogger("lyricstatus.playback.scheduler")
        self.tick = tick
        self.interval = interval

        self._stop_event = asyncio.Event()
        self._tick_task: Optional[asyncio.Task] = None
        self._running = False

        self._ticks_run = 0
        self._ticks_skipped = 0
        self._ticks_failed = 0
        self._slow_ticks = 0

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def tick_in_progress(self) -> bool:
        return self._tick_task is not None and not self._tick_task.done()

    def stop(self) -> None:
        """请求停止调度；可以在信号处理器中调用"""
        if not self._stop_event.is_set():
            self.logger.debug("收到停止请求")
        self._stop_event.set()

    async def run(self) -> None:
        """运行调度循环，直到 stop() 被调用"""
        if self._running:
            raise RuntimeError("调度器已经在运行")

        loop = asyncio.get_running_loop()
        self._running = True
        next_fire = loop.time()

        self.logger.debug(f"调度器启动，周期 {self.interval}s")

        try:
            while not self._stop_event.is_set():
                self._fire()

                next_fire += self.interval
                delay = next_fire - loop.time()
                if delay < 0:
                    # 事件循环被阻塞过，不补发错过的 tick
                    next_fire = loop.time()
                    delay = 0

                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                except asyncio.TimeoutError:
                    pass
        finally:
            await self._cancel_in_flight()
            self._running = False
            self.logger.debug("调度器已停止")

    def _fire(self) -> None:
        if self.tick_in_progress:
            self._ticks_skipped += 1
            self.logger.debug("上一次 tick 尚未完成，跳过本次触发")
            return

        self._tick_task = asyncio.create_task(self._run_tick())

    async def _run_tick(self) -> None:
        loop = asyncio.get_running_loop()
        started = loop.time()
        self._ticks_run += 1

        try:
            await self.tick()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._ticks_failed += 1
            self.logger.error(f"tick 执行出错: {e}", exc_info=True)
        finally:
            elapsed = loop.time() - started
            if elapsed > self.interval:
                self._slow_ticks += 1
                self.logger.debug(f"慢 tick - 耗时: {elapsed:.2f}s (周期: {self.interval}s)")

    async def _cancel_in_flight(self) -> None:
        task = self._tick_task
        if task is None or task.done():
            return

        self.logger.debug("取消正在运行的 tick")
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    def get_stats(self) -> Dict[str, int]:
        """
        获取调度统计信息

        Returns:
            统计字典
        """
        return {
            "ticks_run": self._ticks_run,
            "ticks_skipped": self._ticks_skipped,
            "ticks_failed": self._ticks_failed,
            "slow_ticks": self._slow_ticks
        }
