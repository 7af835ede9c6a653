#!/usr/bin/env python3
"""
lyricstatus - 把 Spotify 当前播放歌曲的同步歌词显示为 Discord 自定义状态

主程序入口点，负责配置加载、凭据校验、授权握手以及优雅的启动/关闭处理。
"""
import argparse
import asyncio
import logging

from lyricstatus.app import LyricStatusApp
from lyricstatus.core.errors import AuthError, ConfigurationError
from lyricstatus.utils.config_manager import ConfigManager
from lyricstatus.utils.logger import setup_logger


def main(argv=None) -> int:
    """
    lyricstatus 主入口函数。

    处理监视器的完整生命周期，包括：
    - 配置加载和凭据校验
    - 日志系统设置
    - 浏览器授权握手
    - 监视循环和中断后的状态清除

    Returns:
        int: 退出代码（0表示成功，1表示错误）
    """
    parser = argparse.ArgumentParser(description="Spotify 同步歌词 → Discord 自定义状态")
    parser.add_argument("-c", "--config", default="config/config.yaml", help="配置文件路径")
    args = parser.parse_args(argv)

    logger = logging.getLogger("lyricstatus")

    try:
        config = ConfigManager(args.config)
    except FileNotFoundError as e:
        setup_logger()
        logger.error(f"❌ 配置文件错误: {e}")
        logger.error(f"请确保 {args.config} 文件存在且配置正确")
        return 1

    setup_logger(
        log_level=config.get_log_level(),
        log_file=config.get_log_file(),
        max_size=config.get_log_max_size(),
        backup_count=config.get_log_backup_count()
    )

    logger.info("=" * 50)
    logger.info("🎵 Spotify Lyrics Monitor with Discord Integration")
    logger.info("=" * 50)

    try:
        config.validate_credentials()
    except ConfigurationError as e:
        logger.error(f"❌ {e}")
        logger.error("请在配置文件中设置 spotify.client_id 和 spotify.client_secret")
        logger.error("获取地址: https://developer.spotify.com/dashboard")
        return 1

    _log_configuration(logger, config)

    app = LyricStatusApp(config)
    try:
        asyncio.run(app.run())
    except KeyboardInterrupt:
        logger.info("🛑 用户停止了监视器 (Ctrl+C)")
    except AuthError as e:
        logger.error(f"❌ Spotify 授权失败: {e}")
        return 1
    except Exception as e:
        logger.error(f"❌ 监视器运行时发生意外错误: {e}", exc_info=True)
        return 1

    logger.info("再见！")
    return 0


def _log_configuration(logger: logging.Logger, config: ConfigManager) -> None:
    """
    记录配置摘要，用于调试和监控。

    Args:
        logger: 日志记录器实例
        config: 配置管理器
    """
    if config.is_discord_enabled():
        logger.info("[INFO] Discord integration enabled!")
    elif config.get('discord.enabled', True):
        logger.warning("[WARNING] Discord token not set. Discord integration disabled.")
        logger.info("[INFO] Set discord.token to enable Discord status updates.")
    else:
        logger.info("[INFO] Discord integration disabled.")

    logger.info(f"   轮询周期: {config.get_poll_interval()} 秒")
    logger.info(f"   歌词服务: {config.get_lyrics_api_base()}")
    logger.info(f"   回调地址: {config.get_spotify_redirect_uri()}")


if __name__ == "__main__":
    exit(main())
