"""Configuration manager for the lyric status monitor."""
import logging
import os
from typing import Any, Dict, Optional
import yaml

from lyricstatus.core.errors import ConfigurationError

# 配置模板中的占位值，视为未配置
PLACEHOLDER_VALUES = {
    "",
    "YOUR_CLIENT_ID_HERE",
    "YOUR_CLIENT_SECRET_HERE",
    "YOUR_DISCORD_TOKEN_HERE",
}

DEFAULT_SCOPES = "user-read-playback-state user-read-currently-playing"


class ConfigManager:
    """
    Configuration manager for the lyric status monitor.

    Handles loading and accessing configuration values from the config file.
    """

    def __init__(self, config_path: str = "config/config.yaml"):
        """
        Initialize the ConfigManager.

        Args:
            config_path: Path to the configuration file

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        self.logger = logging.getLogger("lyricstatus.config")
        self.config_path = config_path
        self.config: Dict[str, Any] = {}

        self._load_config()

    def _load_config(self) -> None:
        """
        Load the configuration from the config file.

        Raises:
            FileNotFoundError: If the configuration file does not exist
            yaml.YAMLError: If the configuration file is not valid YAML
        """
        if not os.path.exists(self.config_path):
            example_path = f"{self.config_path}.example"
            if os.path.exists(example_path):
                self.logger.error(
                    f"Configuration file {self.config_path} not found. "
                    f"Please copy {example_path} to {self.config_path} and update it."
                )
            else:
                self.logger.error(f"Configuration file {self.config_path} not found.")
            raise FileNotFoundError(f"Configuration file {self.config_path} not found")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as config_file:
                self.config = yaml.safe_load(config_file) or {}
                self.logger.debug(f"Loaded configuration from {self.config_path}")
        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing configuration file: {e}")
            raise

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: The configuration key (dot notation for nested keys)
            default: Default value to return if the key is not found

        Returns:
            The configuration value or the default value if not found
        """
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                self.logger.debug(f"Configuration key '{key}' not found, using default: {default}")
                return default

        return value

    def _get_required(self, key: str) -> str:
        value = self.get(key)
        if value is None or str(value).strip() in PLACEHOLDER_VALUES:
            self.logger.error(f"Required configuration value '{key}' is not set")
            raise ConfigurationError(f"配置项 '{key}' 未设置", key=key)
        return str(value).strip()

    # Spotify Configuration Methods
    def get_spotify_client_id(self) -> str:
        """
        Get the Spotify application client ID.

        Raises:
            ConfigurationError: If the client ID is not set
        """
        return self._get_required('spotify.client_id')

    def get_spotify_client_secret(self) -> str:
        """
        Get the Spotify application client secret.

        Raises:
            ConfigurationError: If the client secret is not set
        """
        return self._get_required('spotify.client_secret')

    def get_spotify_redirect_uri(self) -> str:
        """Get the OAuth redirect URI served by the local callback listener."""
        return self.get('spotify.redirect_uri', 'http://localhost:8888/callback')

    def get_spotify_scopes(self) -> str:
        """Get the space separated OAuth scopes."""
        scopes = self.get('spotify.scopes', DEFAULT_SCOPES)
        if isinstance(scopes, list):
            return " ".join(scopes)
        return scopes

    def validate_credentials(self) -> None:
        """
        检查启动所需的凭据是否全部存在

        Raises:
            ConfigurationError: 任一必需凭据缺失
        """
        self.get_spotify_client_id()
        self.get_spotify_client_secret()

    # Discord Presence Configuration Methods
    def is_discord_enabled(self) -> bool:
        """
        检查是否启用了 Discord 自定义状态同步

        令牌未设置时视为禁用。

        Returns:
            如果启用且令牌已配置则返回True
        """
        if not self.get('discord.enabled', True):
            return False
        return self.get_discord_token() is not None

    def get_discord_token(self) -> Optional[str]:
        """
        获取 Discord 用户令牌

        Returns:
            令牌，如果未配置或仍为占位值则返回None
        """
        token = self.get('discord.token', '')
        if token is None or str(token).strip() in PLACEHOLDER_VALUES:
            return None
        return str(token).strip()

    def get_discord_emoji(self) -> str:
        """
        获取状态文本前缀的表情

        Returns:
            表情字符串，可以为空
        """
        emoji = self.get('discord.emoji', '')
        return str(emoji).strip() if emoji else ''

    def get_discord_api_base(self) -> str:
        """获取 Discord API 基础地址"""
        return self.get('discord.api_base', 'https://discord.com/api/v9')

    # Lyrics Configuration Methods
    def get_lyrics_api_base(self) -> str:
        """获取 LRCLIB API 基础地址"""
        return self.get('lyrics.api_base', 'https://lrclib.net')

    def get_lyrics_cache_size(self) -> int:
        """
        获取内存歌词缓存的最大条目数

        Returns:
            最大缓存条目数，0 表示禁用缓存
        """
        return int(self.get('lyrics.cache_size', 50))

    # Monitor Configuration Methods
    def get_poll_interval(self) -> float:
        """
        Get the playback polling interval in seconds.

        Returns:
            Polling interval in seconds
        """
        return float(self.get('monitor.poll_interval', 0.5))

    def get_shutdown_timeout(self) -> float:
        """
        Get the maximum time to wait for the final status clear on shutdown.

        Returns:
            Timeout in seconds
        """
        return float(self.get('monitor.shutdown_timeout', 5.0))

    def get_request_timeout(self) -> float:
        """
        Get the HTTP request timeout used by every external client.

        Returns:
            Timeout in seconds
        """
        return float(self.get('monitor.request_timeout', 10.0))

    # Logging Configuration Methods
    def get_log_level(self) -> str:
        """
        Get the logging level.

        Returns:
            The logging level
        """
        return self.get('logging.level', 'INFO')

    def get_log_file(self) -> Optional[str]:
        """
        Get the log file path.

        Returns:
            The log file path or None if not set
        """
        return self.get('logging.file', None)

    def get_log_max_size(self) -> int:
        """
        Get the maximum log file size.

        Returns:
            The maximum log file size in bytes
        """
        return self.get('logging.max_size', 10485760)  # 10 MB

    def get_log_backup_count(self) -> int:
        """
        Get the number of backup log files to keep.

        Returns:
            The number of backup log files
        """
        return self.get('logging.backup_count', 5)
