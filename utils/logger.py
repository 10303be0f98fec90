import logging
import os
import sys


# stdout is reserved for MCP protocol frames; everything else goes to stderr.
_fmt = logging.Formatter(
    fmt="%(asctime)s  %(levelname)-8s  [%(name)s]  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Console handler (stderr)
    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    ch.setFormatter(_fmt)
    logger.addHandler(ch)

    # Optional file handler (DEBUG and above)
    log_file = os.getenv("LOG_FILE")
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(_fmt)
        logger.addHandler(fh)

    return logger
