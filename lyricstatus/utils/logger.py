"""Logging setup for the lyric status monitor."""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# 第三方库的日志过于嘈杂
NOISY_LOGGERS = ("aiohttp.access", "aiohttp.client", "asyncio")


def setup_logger(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_size: int = 10485760,
    backup_count: int = 5
) -> logging.Logger:
    """
    设置 lyricstatus 日志记录器

    Args:
        log_level: 日志级别名称（DEBUG/INFO/WARNING/ERROR）
        log_file: 日志文件路径，None 表示只输出到控制台
        max_size: 单个日志文件的最大字节数
        backup_count: 保留的备份日志文件数量

    Returns:
        配置完成的 "lyricstatus" 根日志记录器
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logger = logging.getLogger("lyricstatus")
    logger.setLevel(level)
    logger.propagate = False

    # 重复调用时避免叠加处理器
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=max_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
