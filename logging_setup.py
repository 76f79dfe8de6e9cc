# logging_setup.py - publisher logging (full detail to file, warnings+ to console)
import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


def setup_logger(name: str, logfile: str, level: int = logging.INFO,
                 console_level: int = logging.WARNING):
    """Attach a UTF-8 file handler and a console handler to ``name`` once.

    Step banners are printed by the caller, so the console only carries
    warnings (no remote, local-only commit) and errors.
    """
    Path(logfile).parent.mkdir(parents=True, exist_ok=True)
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # already configured
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT)

    fh = logging.FileHandler(logfile, encoding="utf-8")
    fh.setLevel(level)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    ch = logging.StreamHandler()
    ch.setLevel(console_level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)
    return logger
