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

import contextlib
from collections.abc import Sequence
from time import perf_counter

from loguru import logger

from ..data.change import Change


@contextlib.contextmanager
def time_block(block_name: str):
    """
    A context manager to time the execution of a code block and log the result.
    """

    logger.debug(f"Starting {block_name}")
    start_time = perf_counter()

    try:
        yield
    finally:
        end_time = perf_counter()
        duration_ms = int((end_time - start_time) * 1000)

        logger.debug(
            f"Finished {block_name}. Timing(ms)={duration_ms}",
        )


def log_changes(process_step: str, changes: Sequence[Change]):
    unique_files = {
        path
        for change in changes
        for path in (change.old_path, change.current_path)
        if path
    }
    binary_count = sum(1 for change in changes if change.is_binary)

    logger.debug(
        "{process_step}: changes={count} files={files} binary={binary}",
        process_step=process_step,
        count=len(changes),
        files=len(unique_files),
        binary=binary_count,
    )
