import logging
import os
from pathlib import Path
from typing import Optional
from logging.handlers import TimedRotatingFileHandler
from rich.logging import RichHandler
from batchcensor.core.console import console as console_manager

def setup_logging(log_dir: Optional[str] = None, debug: bool = False, output_mode: str = "standard") -> logging.Logger:
    """Configures logging to console and rotating file.

    Args:
        log_dir: Directory for log files. If None, uses ~/.local/state/batchcensor/logs
        debug: If True, set logging level to DEBUG, otherwise INFO
        output_mode: 'standard', 'verbose', 'silent'. 'silent' suppresses console output.
    """
    if log_dir is None:
        xdg_state = os.environ.get("XDG_STATE_HOME")
        if xdg_state:
            log_dir = str(Path(xdg_state) / "batchcensor" / "logs")
        else:
            log_dir = str(Path.home() / ".local" / "state" / "batchcensor" / "logs")

    log_file = os.path.join(log_dir, "batchcensor.log")

    logger = logging.getLogger("BatchCensor")

    if output_mode == "silent":
        console_level = logging.CRITICAL
        file_level = logging.DEBUG  # Always log details to file
    elif debug:
        console_level = logging.DEBUG
        file_level = logging.DEBUG
    else:
        console_level = logging.INFO
        file_level = logging.INFO

    # Set logger to lowest level to capture everything for handlers
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Avoid adding handlers multiple times
    if not logger.handlers:
        # shared console instance keeps log lines and progress bars from interleaving
        console_handler = RichHandler(
            console=console_manager.console,
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_path=False
        )
        console_handler.setLevel(console_level)
        logger.addHandler(console_handler)

        try:
            os.makedirs(log_dir, exist_ok=True)
            file_handler = TimedRotatingFileHandler(log_file, when="midnight", interval=1, backupCount=30)
            file_handler.setLevel(file_level)
            file_handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
            logger.addHandler(file_handler)
        except OSError as e:
            # We can't log this normally as handlers aren't set up
            if output_mode != "silent":
                console_manager.warning(f"Could not create log file at {log_file}: {e}. Logging to console only.")

    else:
        for handler in logger.handlers:
            if isinstance(handler, TimedRotatingFileHandler):
                handler.setLevel(file_level)
            else:
                handler.setLevel(console_level)

    return logger
