# Simple logger

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(message)s'


def setup_logging(log_file=None, level=logging.INFO):
    """
    Attach stdout (and optionally file) handlers to the library logger.
    Calling it again replaces the previous handlers instead of stacking them.
    Records do not propagate to the root logger, so applications that
    configure root logging see each line once.
    """
    log = logging.getLogger("minineuralnet")
    for handler in log.handlers[:]:
        handler.close()
        log.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        log.addHandler(handler)

    log.setLevel(level)
    log.propagate = False
    return log


setup_logging()

logger = logging.getLogger("minineuralnet")
