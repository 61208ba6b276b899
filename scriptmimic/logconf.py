# scriptmimic/logconf.py
import datetime
import logging
import pathlib
import sys

FORMAT = "%(asctime)s | %(levelname)-5s | %(module)s | %(message)s"


def init(level: str = "INFO", log_dir: pathlib.Path | None = None):
    """Configure root logger once per run."""
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            logging.FileHandler(log_dir / f"scriptmimic_{datetime.date.today()}.log", encoding="utf-8")
        )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=FORMAT,
        handlers=handlers,
        force=True,
    )
