# fedora-postinstall/postinstall/logger_utils.py
import logging
import sys
from pathlib import Path
from typing import Optional

LOGGER_NAME = "FedoraPostInstall"
LOG_SUBDIR = Path(".config") / "fedora-postinstall"
LOG_FILENAME = "fedora_postinstall.log"


def default_log_file() -> Path:
    """~/.config/fedora-postinstall/fedora_postinstall.log, resolved against the current HOME."""
    return Path.home() / LOG_SUBDIR / LOG_FILENAME


def setup_logger(
    logger_name: str = LOGGER_NAME,
    log_level: int = logging.INFO,
    log_to_file: bool = True,
    log_file_path: Optional[Path] = None,
    log_to_console: bool = False,
    console_log_level: int = logging.WARNING
) -> logging.Logger:
    """
    Configures and returns a logger instance.

    Args:
        logger_name (str): The name for the logger instance.
        log_level (int): The base logging level for the logger itself and the file handler.
        log_to_file (bool): Whether to enable logging to a file.
        log_file_path (Optional[Path]): Absolute path to the log file.
                                        Defaults to default_log_file().
        log_to_console (bool): Whether to also log through a stream handler.
                               Off by default, console_output.py owns the terminal.
        console_log_level (int): The level for the console handler, if enabled.

    Returns:
        logging.Logger: The configured logger instance.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(log_level)

    # Re-configuring the same logger (e.g. --verbose, or in tests) must not stack handlers.
    if logger.hasHandlers():
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - [%(module)s:%(lineno)d] - %(message)s"
    )

    if log_to_file:
        effective_log_file_path = log_file_path or default_log_file()
        try:
            effective_log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(effective_log_file_path, mode='a', encoding='utf-8')
        except OSError as e:
            # console_output is not used here, it may not be importable yet.
            sys.stderr.write(f"ERROR [logger_utils]: Could not open log file {effective_log_file_path}. File logging disabled. Error: {e}\n")
        else:
            file_handler.setLevel(log_level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            logger.info(f"File logging initialized to: {effective_log_file_path}")

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_log_level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if not logger.hasHandlers():
        logger.addHandler(logging.NullHandler())

    return logger

# Importing must not touch the filesystem. main() attaches the file handler once the root check has passed.
app_logger = setup_logger(log_to_file=False)
