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
Turns diff text into Change objects.

Parsing itself is done by unidiff; this module only maps unidiff's
PatchedFile/Hunk/Line objects onto the bundle data model and reads the git
extended header lines (modes, renames, copies) that unidiff keeps in
`patch_info`.
"""

import re
from io import StringIO

from loguru import logger
from unidiff import PatchSet
from unidiff.errors import UnidiffParseError

from patchbundle.core.data.change import FILE_MODE_PROPERTY, Change, ChangeType, FileType
from patchbundle.core.data.hunk import CONTEXT_PREFIX, LINE_PREFIXES, Hunk
from patchbundle.core.diff.diff_generator import DEV_NULL
from patchbundle.core.exceptions import ValidationError

_NEW_FILE_MODE_RE = re.compile(r"^new file mode (\d+)$")
_DELETED_FILE_MODE_RE = re.compile(r"^deleted file mode (\d+)$")
_OLD_MODE_RE = re.compile(r"^old mode (\d+)$")
_NEW_MODE_RE = re.compile(r"^new mode (\d+)$")
_INDEX_MODE_RE = re.compile(r"^index \w+\.\.\w+ (\d+)$")
_RENAME_FROM_RE = re.compile(r"^rename from (.+)$")
_RENAME_TO_RE = re.compile(r"^rename to (.+)$")
_COPY_FROM_RE = re.compile(r"^copy from (.+)$")
_COPY_TO_RE = re.compile(r"^copy to (.+)$")


def _strip_prefix(path: str | None) -> str | None:
    if not path or path == DEV_NULL:
        return None
    path = path.split("\t", 1)[0]
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def _parse_header(patch_info) -> dict[str, str]:
    """Collect the git extended header values of one file."""
    header = {}
    patterns = {
        "new_file_mode": _NEW_FILE_MODE_RE,
        "deleted_file_mode": _DELETED_FILE_MODE_RE,
        "old_mode": _OLD_MODE_RE,
        "new_mode": _NEW_MODE_RE,
        "index_mode": _INDEX_MODE_RE,
        "rename_from": _RENAME_FROM_RE,
        "rename_to": _RENAME_TO_RE,
        "copy_from": _COPY_FROM_RE,
        "copy_to": _COPY_TO_RE,
    }
    for raw_line in patch_info or []:
        line = raw_line.rstrip("\r\n")
        for key, pattern in patterns.items():
            match = pattern.match(line)
            if match:
                header[key] = match.group(1)
                break
    return header


def _hunk_corpus(unidiff_hunk) -> str:
    lines = []
    for line in unidiff_hunk:
        prefix = line.line_type if line.line_type in LINE_PREFIXES else CONTEXT_PREFIX
        value = line.value
        if value.endswith("\n"):
            value = value[:-1]
        lines.append(prefix + value)
    return "\n".join(lines)


def _change_type(patched_file, header: dict[str, str]) -> ChangeType:
    if "copy_from" in header:
        return ChangeType.COPY_HERE
    if patched_file.is_rename or "rename_from" in header:
        return ChangeType.MOVE_HERE
    if patched_file.is_added_file or "new_file_mode" in header:
        return ChangeType.ADD
    if patched_file.is_removed_file or "deleted_file_mode" in header:
        return ChangeType.DELETE
    return ChangeType.MODIFY


def _to_change(patched_file) -> Change:
    header = _parse_header(patched_file.patch_info)
    change_type = _change_type(patched_file, header)

    old_path = header.get("rename_from") or header.get("copy_from")
    old_path = old_path or _strip_prefix(patched_file.source_file)
    current_path = header.get("rename_to") or header.get("copy_to")
    current_path = current_path or _strip_prefix(patched_file.target_file)

    if change_type == ChangeType.ADD:
        old_path = None
    elif change_type == ChangeType.DELETE:
        current_path = None

    old_properties = {}
    new_properties = {}
    old_mode = header.get("old_mode") or header.get("deleted_file_mode")
    new_mode = header.get("new_mode") or header.get("new_file_mode")
    if "index_mode" in header:
        old_mode = old_mode or header["index_mode"]
        new_mode = new_mode or header["index_mode"]
    if old_mode and change_type != ChangeType.ADD:
        old_properties[FILE_MODE_PROPERTY] = old_mode
    if new_mode and change_type != ChangeType.DELETE:
        new_properties[FILE_MODE_PROPERTY] = new_mode

    if patched_file.is_binary_file:
        file_type = FileType.BINARY
        hunks = []
    else:
        file_type = FileType.TEXT
        hunks = [
            Hunk(
                old_offset=unidiff_hunk.source_start,
                new_offset=unidiff_hunk.target_start,
                old_length=unidiff_hunk.source_length,
                new_length=unidiff_hunk.target_length,
                corpus=_hunk_corpus(unidiff_hunk),
            )
            for unidiff_hunk in patched_file
        ]

    return Change(
        change_type=change_type,
        file_type=file_type,
        old_path=old_path,
        current_path=current_path,
        old_properties=old_properties,
        new_properties=new_properties,
        hunks=hunks,
    )


def parse_diff(text: str) -> list[Change]:
    """
    Parse unified or git diff text into changes.

    Binary files come out as BINARY changes without content; rendering them
    needs blob phids added to their metadata.
    """
    try:
        patch_set = PatchSet(StringIO(text))
    except UnidiffParseError as e:
        raise ValidationError("Could not parse diff text", str(e)) from e

    changes = [_to_change(patched_file) for patched_file in patch_set]
    logger.debug(f"Parsed {len(changes)} changes from diff text")
    return changes
