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

import pytest

from patchbundle.core.exceptions import ValidationError
from patchbundle.core.validation import (
    is_archive_path,
    validate_input_file,
    validate_output_file,
)


def test_validate_input_file(tmp_path):
    path = tmp_path / "change.diff"
    path.write_text("")

    assert validate_input_file(str(path)) == path

    with pytest.raises(ValidationError, match="Path not found"):
        validate_input_file(tmp_path / "missing.diff")

    with pytest.raises(ValidationError, match="is not a file"):
        validate_input_file(tmp_path)


def test_validate_output_file(tmp_path):
    assert validate_output_file(tmp_path / "out.arcbundle") == tmp_path / "out.arcbundle"

    with pytest.raises(ValidationError, match="is a directory"):
        validate_output_file(tmp_path)

    with pytest.raises(ValidationError, match="Path not found"):
        validate_output_file(tmp_path / "nope" / "out.arcbundle")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("x.arcbundle", True),
        ("x.tar.gz", True),
        ("x.tgz", True),
        ("x.diff", False),
        ("x.patch", False),
    ],
)
def test_is_archive_path(name, expected):
    assert is_archive_path(Path(name)) is expected
