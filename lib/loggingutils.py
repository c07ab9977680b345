"""Logging helpers shared by the framework packages."""

import logging
import platform
from datetime import datetime
from pathlib import Path

from mpi4py import MPI
from rich.console import Console
from rich.logging import RichHandler

_TIME_FORMAT: str = "%d.%m.%Y %H:%M:%S"
_FILE_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _rank() -> int:
    return MPI.COMM_WORLD.Get_rank()


def _write_header(file_path: Path) -> None:
    header_lines = [
        f"# Session start: {datetime.now().strftime(_TIME_FORMAT)}",
        f"# Python: {platform.python_version()}",
        f"# Host: {platform.node()}",
        f"# MPI ranks: {MPI.COMM_WORLD.Get_size()}\n",
        "",
    ]
    file_path.write_text("\n".join(header_lines))


def setup_logging(
    verbose: bool = False,
    *,
    output_path: Path | None = None,
    disabled: bool = False,
) -> None:
    """Set up console (and optionally file) logging.

    Handlers are only installed once per process; later calls are no-ops. Unlike the console handler, the log file is
    only written when `output_path` is given, so that unit tests do not litter the working directory.
    """
    if disabled:
        return
    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.DEBUG if verbose else logging.INFO

    console = Console(stderr=True, color_system="auto")
    console_handler = RichHandler(console=console, rich_tracebacks=True, markup=False)
    console_handler.setLevel(level)
    root.setLevel(level)
    root.addHandler(console_handler)

    if output_path is None:
        return

    output_path.mkdir(parents=True, exist_ok=True)
    log_file = output_path / "log.log"
    if _rank() == 0:
        _write_header(log_file)

    file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_TIME_FORMAT))
    root.addHandler(file_handler)


def log_global(logger: logging.Logger, level: int, msg: str, *args, **kwargs) -> None:
    """Log globally (in parallel runs, this means logging only on rank 0)."""
    if _rank() == 0:
        logger.log(level, msg, *args, stacklevel=2, **kwargs)
