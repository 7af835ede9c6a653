"""
配置管理器测试
"""

import os
import shutil
import tempfile
import unittest

from lyricstatus.core.errors import ConfigurationError, ErrorCategory
from lyricstatus.utils.config_manager import ConfigManager


class TestConfigManager(unittest.TestCase):
    """配置管理器测试类"""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.temp_dir, "config.yaml")

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, content: str) -> ConfigManager:
        with open(self.config_path, 'w', encoding='utf-8') as f:
            f.write(content)
        return ConfigManager(self.config_path)

    def test_missing_file(self):
        """测试配置文件不存在"""
        with self.assertRaises(FileNotFoundError):
            ConfigManager(os.path.join(self.temp_dir, "missing.yaml"))

    def test_defaults(self):
        """测试空配置文件使用默认值"""
        config = self._write("")

        self.assertEqual(config.get_poll_interval(), 0.5)
        self.assertEqual(config.get_shutdown_timeout(), 5.0)
        self.assertEqual(config.get_spotify_redirect_uri(), "http://localhost:8888/callback")
        self.assertEqual(
            config.get_spotify_scopes(),
            "user-read-playback-state user-read-currently-playing"
        )
        self.assertEqual(config.get_lyrics_api_base(), "https://lrclib.net")
        self.assertEqual(config.get_log_level(), "INFO")
        self.assertIsNone(config.get_log_file())

    def test_dot_notation(self):
        """测试点号访问嵌套配置"""
        config = self._write("monitor:\n  poll_interval: 0.25\n")

        self.assertEqual(config.get('monitor.poll_interval'), 0.25)
        self.assertEqual(config.get('monitor.missing', 'default'), 'default')
        self.assertEqual(config.get_poll_interval(), 0.25)

    def test_credentials_present(self):
        """测试凭据完整时校验通过"""
        config = self._write(
            "spotify:\n"
            "  client_id: abc\n"
            "  client_secret: def\n"
        )

        config.validate_credentials()
        self.assertEqual(config.get_spotify_client_id(), "abc")
        self.assertEqual(config.get_spotify_client_secret(), "def")

    def test_placeholder_credentials_rejected(self):
        """测试占位值视为未配置"""
        config = self._write(
            "spotify:\n"
            "  client_id: YOUR_CLIENT_ID_HERE\n"
            "  client_secret: def\n"
        )

        with self.assertRaises(ConfigurationError) as ctx:
            config.validate_credentials()

        self.assertEqual(ctx.exception.key, "spotify.client_id")
        self.assertEqual(ctx.exception.category, ErrorCategory.CONFIGURATION_ERROR)
        self.assertFalse(ctx.exception.recoverable)

    def test_missing_secret_rejected(self):
        """测试缺少 client_secret"""
        config = self._write("spotify:\n  client_id: abc\n")

        with self.assertRaises(ConfigurationError):
            config.validate_credentials()

    def test_discord_disabled_without_token(self):
        """测试没有令牌时禁用 Discord"""
        config = self._write("discord:\n  enabled: true\n  token: YOUR_DISCORD_TOKEN_HERE\n")

        self.assertIsNone(config.get_discord_token())
        self.assertFalse(config.is_discord_enabled())

    def test_discord_enabled(self):
        """测试 Discord 启用和表情"""
        config = self._write("discord:\n  token: secret\n  emoji: '🎵'\n")

        self.assertTrue(config.is_discord_enabled())
        self.assertEqual(config.get_discord_token(), "secret")
        self.assertEqual(config.get_discord_emoji(), "🎵")

    def test_discord_explicitly_disabled(self):
        """测试显式禁用 Discord"""
        config = self._write("discord:\n  enabled: false\n  token: secret\n")

        self.assertFalse(config.is_discord_enabled())

    def test_scopes_as_list(self):
        """测试权限范围可以写成列表"""
        config = self._write("spotify:\n  scopes:\n    - a\n    - b\n")

        self.assertEqual(config.get_spotify_scopes(), "a b")


if __name__ == '__main__':
    unittest.main()
