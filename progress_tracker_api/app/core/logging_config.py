"""
Logging configuration for the Progress Tracker API.

``setup_logging`` attaches a console handler (and a file handler when
``LOG_FILE`` is set) to the root logger.  Modules log through
``logging.getLogger(__name__)``, so every line names its origin: the
repository, the task routes or the request logging middleware.

Two third-party loggers are tuned here.  ``pymongo`` reports every
server heartbeat at DEBUG, and ``uvicorn.access`` would repeat the line
``RequestLoggingMiddleware`` already writes for each request.
"""

import logging
from pathlib import Path
from typing import Dict, Optional


THIRD_PARTY_LEVELS: Dict[str, int] = {
    "pymongo": logging.INFO,
    "uvicorn.access": logging.WARNING,
}


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger for the API process.

    The level is applied on every call, so a second ``create_app`` with
    different settings takes effect.  Handlers are attached only once:
    if the root logger already has some (installed by an earlier call or
    by a test runner) they are left as they are.

    Parameters
    ----------
    level : str
        Logging level name, already normalised by ``load_settings``.
    logfile : Optional[str]
        Path of a file that receives a copy of every line.  Missing
        parent directories are created.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name, floor in THIRD_PARTY_LEVELS.items():
        logging.getLogger(name).setLevel(max(floor, root.level))

    if root.handlers:
        return

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers = [logging.StreamHandler()]
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
