# 文件: PyIGAMat/igamat/logging_config.py
"""
日志配置

库内部每个模块只通过 logging.getLogger(__name__) 取得 'igamat.*' 日志器，
包日志器挂一个 NullHandler，应用程序调用 setup_logging() 之前不输出任何内容。
"""

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "igamat"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    配置 'igamat' 包日志器

    重复调用时替换已有的处理器，输出不会重复。

    Args:
        level: 日志级别 (logging.DEBUG 可看到逐层刚度与厚度积分摘要)
        log_file: 可选的日志文件路径 (覆盖写入)

    Returns:
        配置好的包日志器

    Example:
        setup_logging(logging.DEBUG, log_file='igamat.log')
        integrator.evaluate(points)
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), level))
    if log_file:
        logger.addHandler(
            _make_handler(logging.FileHandler(log_file, mode='w', encoding='utf-8'), level)
        )

    logger.debug("Handlers: %s", [type(h).__name__ for h in logger.handlers])
    logger.info("Logging initialized.")
    return logger
