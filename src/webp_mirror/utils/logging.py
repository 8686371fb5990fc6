"""日志初始化。"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(threadName)s] %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """配置根日志；verbose 时输出本项目的调试日志。

    Pillow 在 DEBUG 级别会逐块打印 PNG 解析信息，这里始终把它限制在 INFO 以上。
    """

    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("PIL").setLevel(max(level, logging.INFO))
