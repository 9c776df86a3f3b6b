"""phrasemark - highlight search phrases in HTML without disturbing markup.

Matches are case-insensitive, may span several text nodes, and respect
encoded character references in the source.
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from phrasemark.highlight import HighlightOptions, count_matches, highlight

__version__ = "0.1.0"

__all__ = ["HighlightOptions", "__version__", "count_matches", "highlight"]

_CONSOLE_HANDLER = "phrasemark.console"


def _setup_logging(level: str = "INFO", log_dir: Path | None = None) -> None:
    """Configure console logging, plus a rotating file when *log_dir* is set.

    Only the first call installs handlers.
    """
    root_logger = logging.getLogger()
    # Already configured by an earlier call
    if any(h.get_name() == _CONSOLE_HANDLER for h in root_logger.handlers):
        return
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler()
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "phrasemark.log"
    # 10MB, keep 5 backups
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)
    logging.info("Logging configured. Log file: %s", log_file.absolute())
