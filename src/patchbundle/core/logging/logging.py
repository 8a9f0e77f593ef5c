# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

"""
Logging configuration for the patchbundle CLI.

Console output goes to stderr so that rendered patches on stdout stay
clean; a detailed DEBUG log is kept under the user log directory.
"""

import os
from datetime import datetime
from pathlib import Path

from loguru import logger
from rich.console import Console
from rich.text import Text

from patchbundle.constants import APP_NAME, ENV_APP_PREFIX, LOG_DIR

LOG_LEVEL_ENV = f"{ENV_APP_PREFIX}LOG_LEVEL"
CONSOLE_LOG_LEVEL_ENV = f"{ENV_APP_PREFIX}CONSOLE_LOG_LEVEL"

FILE_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} | {extra[command]} | {message}"
)


def _console_sink(console: Console):
    def sink(message):
        console.print(Text(message.record["message"].rstrip("\n")))

    return sink


def _new_logfile(log_dir: Path) -> Path:
    log_dir.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    return log_dir / f"{APP_NAME}_{stamp}.log"


def setup_logger(command_name: str, debug: bool = False, silent: bool = False) -> Path:
    """
    Route loguru output for one CLI invocation.

    Args:
        command_name: Name of the command being executed
        debug: Log DEBUG messages to the console as well
        silent: Do not log to the console at all

    Returns:
        Path to the log file
    """
    if debug:
        os.environ[LOG_LEVEL_ENV] = "DEBUG"
        os.environ[CONSOLE_LOG_LEVEL_ENV] = "DEBUG"

    log_level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    console_level = os.getenv(CONSOLE_LOG_LEVEL_ENV, log_level).upper()

    logger.remove()
    logger.configure(extra={"command": command_name})

    if not silent:
        logger.add(
            _console_sink(Console(stderr=True)),
            level=console_level,
            format="{message}",
            catch=True,
        )

    logfile = _new_logfile(LOG_DIR)
    logger.add(
        logfile,
        level="DEBUG",
        format=FILE_LOG_FORMAT,
        rotation="10 MB",
        retention="14 days",
        compression="gz",
        catch=True,
        backtrace=True,
        diagnose=False,
    )

    logger.debug(f"Logging to {logfile} (console level {console_level})")
    return logfile
