"""
Session logging for the CLI scripts.

The package disables its own loguru output on import (quill/__init__.py) and
setup_logger re-enables it, so the core stays silent inside other programs.
Each CLI run gets its own directory under LOGS_PATH holding one DEBUG log
file, and INFO+ is echoed to stdout.
Context-specific wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

import quill
from quill.utils.config import resolve_config_path

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <7} | {message}"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | <level>{message}</level>"
)


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[dict] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru to a session log file and the console.

    Replaces any previously configured sinks, so calling it twice in one
    process starts a fresh session.

    Args:
        context_name: Session name, used as the log file stem ("analyze", "review")
        log_dir: Directory for this session, created if missing
        extra_provenance: Additional key-value pairs for the provenance header
        console_level: Minimum level echoed to stdout

    Returns:
        Path to log file
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.enable("quill")
    logger.configure(
        handlers=[
            {"sink": log_file, "format": FILE_FORMAT, "level": "DEBUG"},
            {
                "sink": sys.stdout,
                "format": CONSOLE_FORMAT,
                "level": console_level,
                "colorize": True,
            },
        ]
    )

    provenance = session_provenance(context_name)
    provenance.update(extra_provenance or {})
    log_provenance(provenance)

    return log_file


def session_provenance(context_name: str) -> dict:
    """What produced this log: command line, interpreter, package and config in effect."""
    return {
        "Session": context_name,
        "Command": " ".join(sys.argv),
        "Working directory": Path.cwd(),
        "Python": sys.version.split()[0],
        "quill": quill.__version__,
        "Scoring config": resolve_config_path(),
    }


def log_provenance(provenance: dict) -> None:
    """Log provenance as an aligned key/value block between rules."""
    width = max((len(str(key)) for key in provenance), default=0)
    logger.info("=" * 80)
    for key, value in provenance.items():
        logger.info(f"{str(key) + ':':<{width + 1}} {value}")
    logger.info("=" * 80)
