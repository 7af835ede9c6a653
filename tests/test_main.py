"""
程序入口测试 - 退出代码
"""

import logging

import pytest

import main as entry
from lyricstatus.core.errors import AuthError

VALID_CONFIG = (
    "spotify:\n"
    "  client_id: abc\n"
    "  client_secret: def\n"
    "discord:\n"
    "  enabled: false\n"
)


@pytest.fixture(autouse=True)
def restore_logger():
    """main() 会重新配置 lyricstatus 日志记录器，测试后恢复"""
    logger = logging.getLogger("lyricstatus")
    handlers = list(logger.handlers)
    propagate = logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.propagate = propagate


@pytest.fixture
def config_file(tmp_path):
    def write(content: str) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(content, encoding="utf-8")
        return str(path)
    return write


class FakeApp:
    """替代 LyricStatusApp，run() 的行为由类属性决定"""

    error = None
    runs = 0

    def __init__(self, config):
        self.config = config

    async def run(self):
        FakeApp.runs += 1
        if FakeApp.error is not None:
            raise FakeApp.error


@pytest.fixture
def fake_app(monkeypatch):
    FakeApp.error = None
    FakeApp.runs = 0
    monkeypatch.setattr(entry, "LyricStatusApp", FakeApp)
    return FakeApp


def test_missing_config_file(tmp_path, fake_app):
    assert entry.main(["-c", str(tmp_path / "missing.yaml")]) == 1
    assert fake_app.runs == 0


def test_placeholder_credentials(config_file, fake_app):
    path = config_file(
        "spotify:\n"
        "  client_id: YOUR_CLIENT_ID_HERE\n"
        "  client_secret: YOUR_CLIENT_SECRET_HERE\n"
    )

    assert entry.main(["-c", path]) == 1
    assert fake_app.runs == 0


def test_unset_credentials(config_file, fake_app):
    assert entry.main(["-c", config_file("discord:\n  enabled: false\n")]) == 1
    assert fake_app.runs == 0


def test_normal_stop(config_file, fake_app):
    assert entry.main(["-c", config_file(VALID_CONFIG)]) == 0
    assert fake_app.runs == 1


def test_authorization_failure(config_file, fake_app):
    fake_app.error = AuthError("授权被拒绝: access_denied")
    assert entry.main(["-c", config_file(VALID_CONFIG)]) == 1


def test_keyboard_interrupt(config_file, fake_app):
    fake_app.error = KeyboardInterrupt()
    assert entry.main(["-c", config_file(VALID_CONFIG)]) == 0


def test_unexpected_error(config_file, fake_app):
    fake_app.error = RuntimeError("boom")
    assert entry.main(["-c", config_file(VALID_CONFIG)]) == 1
