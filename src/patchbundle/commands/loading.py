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

from pathlib import Path

from loguru import logger

from patchbundle.bundle import Bundle
from patchbundle.context import GlobalContext
from patchbundle.core.logging.utils import time_block
from patchbundle.core.validation import is_archive_path, validate_input_file


def load_bundle(
    global_context: GlobalContext, source: str | Path, arcbundle: bool | None
) -> Bundle:
    """
    Load `source` as an archive or as diff text.

    With `arcbundle` unset the choice is made from the file name.
    """
    path = validate_input_file(source)
    as_archive = is_archive_path(path) if arcbundle is None else arcbundle

    with time_block(f"Loading {path}"):
        if as_archive:
            logger.debug(f"Reading {path} as an archive bundle")
            return Bundle.from_archive(
                path,
                remote_source=global_context.remote_source,
                archiver=global_context.archiver,
            )

        logger.debug(f"Reading {path} as diff text")
        return Bundle.from_diff(
            path.read_text(encoding="utf-8"),
            remote_source=global_context.remote_source,
            archiver=global_context.archiver,
        )
