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

from patchbundle.constants import ARCHIVE_SUFFIX
from patchbundle.core.exceptions import ValidationError, path_not_found


def validate_input_file(value: str | Path) -> Path:
    """Validate that an input file exists and is a regular file."""
    path = Path(value)

    if not path.exists():
        raise path_not_found(str(path))

    if not path.is_file():
        raise ValidationError(f"Input '{path}' is not a file")

    return path


def validate_output_file(value: str | Path) -> Path:
    """Validate that an archive can be written at `value`."""
    path = Path(value)

    if path.exists() and path.is_dir():
        raise ValidationError(f"Output '{path}' is a directory")

    if not path.parent.exists():
        raise path_not_found(str(path.parent))

    return path


def is_archive_path(path: Path) -> bool:
    return path.suffix == ARCHIVE_SUFFIX or path.name.endswith((".tar.gz", ".tgz"))
