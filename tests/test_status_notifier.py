"""
状态通知器测试
"""

import pytest

from lyricstatus.core.monitor_state import MonitorState
from lyricstatus.presence.status_notifier import StatusNotifier

from conftest import RecordingPresence


@pytest.mark.asyncio
async def test_identical_text_pushed_once(monitor_state, presence):
    """测试连续两次相同文本只推送一次"""
    notifier = StatusNotifier(monitor_state, presence)

    assert await notifier.notify("Hello") is True
    assert await notifier.notify("Hello") is False

    assert presence.pushes == ["Hello"]
    assert monitor_state.last_notified_text == "Hello"


@pytest.mark.asyncio
async def test_clear_after_text(monitor_state, presence):
    """测试非空文本之后的空文本产生一次清除推送"""
    notifier = StatusNotifier(monitor_state, presence)

    await notifier.notify("Hello")
    await notifier.notify("")
    await notifier.notify("")

    assert presence.pushes == ["Hello", None]
    assert monitor_state.last_notified_text == ""


@pytest.mark.asyncio
async def test_initial_clear_is_pushed(monitor_state, presence):
    """测试启动后第一次清除也会推送"""
    notifier = StatusNotifier(monitor_state, presence)

    assert await notifier.clear() is True
    assert presence.pushes == [None]


@pytest.mark.asyncio
async def test_emoji_prefix(monitor_state, presence):
    """测试配置表情时加上前缀"""
    notifier = StatusNotifier(monitor_state, presence, emoji="🎵")

    assert notifier.format_status("Hello") == "🎵 Hello"
    assert notifier.format_status("") == ""

    await notifier.notify("Hello")
    assert presence.pushes == ["🎵 Hello"]
    assert monitor_state.last_notified_text == "🎵 Hello"


@pytest.mark.asyncio
async def test_failure_leaves_last_notified_unchanged():
    """测试推送失败时不更新 last_notified_text，下次相同文本会重试"""
    state = MonitorState()
    presence = RecordingPresence(fail=True)
    notifier = StatusNotifier(state, presence)

    assert await notifier.notify("Hello") is False
    assert state.last_notified_text is None
    assert notifier.failure_count == 1

    presence.fail = False
    assert await notifier.notify("Hello") is True
    assert presence.pushes == ["Hello", "Hello"]
    assert state.last_notified_text == "Hello"


@pytest.mark.asyncio
async def test_disabled_notifier_never_pushes(monitor_state):
    """测试没有展示服务时只记录日志"""
    notifier = StatusNotifier(monitor_state, None)

    assert notifier.enabled is False
    assert await notifier.notify("Hello") is False
    assert monitor_state.last_notified_text is None
