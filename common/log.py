import logging


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Return a configured logger for a pipeline stage.

    A level already set on the logger is kept; `level` only fills in NOTSET.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(name)s] %(levelname)s: %(message)s")
        )
        logger.addHandler(handler)
    if logger.level == logging.NOTSET:
        logger.setLevel(level)
    return logger
