import logging
import sys

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name, level="INFO"):
    # ハンドラは 1 回だけ付ける（何度呼んでも出力が重複しない）
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
