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

from collections.abc import Callable, Sequence

from loguru import logger

from patchbundle.core.data.change import (
    BINARY_FILE_TYPES,
    FILE_MODE_PROPERTY,
    NEW_BINARY_PHID,
    OLD_BINARY_PHID,
    Change,
    ChangeType,
    FileType,
)
from patchbundle.core.diff.binary_patch import encode_binary_change
from patchbundle.core.diff.diff_generator import DEV_NULL, DiffGenerator
from patchbundle.core.diff.hunk_splitter import DEFAULT_CONTEXT
from patchbundle.core.exceptions import missing_blob_reference, no_blob_source

TEXT_FILE_TYPES = frozenset(
    {
        FileType.TEXT,
        FileType.SYMLINK,
        FileType.DELETED,
        FileType.NORMAL,
        FileType.SUBMODULE,
    }
)

# types whose mode change is reported with old mode / new mode lines
MODE_CHANGE_TYPES = frozenset(
    {ChangeType.COPY_HERE, ChangeType.MOVE_HERE, ChangeType.COPY_AWAY}
)

# types that need no header beyond diff --git (and new file mode for ADD)
PLAIN_HEADER_TYPES = frozenset(
    {
        ChangeType.ADD,
        ChangeType.MODIFY,
        ChangeType.MOVE_AWAY,
        ChangeType.COPY_AWAY,
        ChangeType.MESSAGE,
        ChangeType.CHILD,
    }
)


def _missing_blob_fetcher(phid: str) -> bytes:
    raise no_blob_source(phid)


class GitPatchGenerator(DiffGenerator):
    """
    Renders changes as a patch `git apply` understands, including renames,
    copies, mode changes and binary literals.

    Binary content is looked up through `get_blob`, keyed by the phids in each
    change's metadata.
    """

    def __init__(
        self,
        get_blob: Callable[[str], bytes] | None = None,
        context: int = DEFAULT_CONTEXT,
    ):
        super().__init__(context)
        self.get_blob = get_blob or _missing_blob_fetcher

    def generate_diff(self, changes: Sequence[Change]) -> str:
        result = []
        for change in changes:
            block = self.build_change(change)
            if block is not None:
                result.append(block)

        logger.debug(
            "Rendered git patch: {rendered} of {count} changes",
            rendered=len(result),
            count=len(changes),
        )
        return "\n".join(result) + "\n"

    def build_change(self, change: Change) -> str | None:
        """Render one file section, or None when git has nothing to represent."""
        change_type = change.change_type
        file_type = change.file_type

        if file_type == FileType.DIRECTORY:
            # Git has no empty directories; non-empty ones are created by the
            # changes to the files inside them.
            logger.debug(f"Skipping directory change {change.current_path}")
            return None

        if change_type == ChangeType.MOVE_AWAY:
            # rendered as a whole by the matching MOVE_HERE
            return None

        old_mode = change.old_mode
        new_mode = change.new_mode

        if file_type in BINARY_FILE_TYPES:
            is_binary = True
            change_body = self.build_binary_change(change)
        elif file_type in TEXT_FILE_TYPES:
            is_binary = False
            change_body = self.build_hunk_changes(change.hunks)
        else:
            raise ValueError(f"Unhandled file type {file_type!r}")

        if change_type == ChangeType.COPY_AWAY:
            # Legacy diffs record unmodified copy sources as COPY_AWAY.
            if not change_body and old_mode == new_mode:
                return None

        old_path = self.get_old_path(change)
        cur_path = self.get_current_path(change)

        if old_path is None:
            old_index = f"a/{cur_path}"
            old_target = DEV_NULL
        else:
            old_index = f"a/{old_path}"
            old_target = f"a/{old_path}"

        if cur_path is None:
            cur_index = f"b/{old_path}"
            cur_target = DEV_NULL
        else:
            cur_index = f"b/{cur_path}"
            cur_target = f"b/{cur_path}"

        result = [f"diff --git {old_index} {cur_index}"]

        if change_type == ChangeType.ADD:
            result.append(f"new file mode {new_mode}")

        if change_type in MODE_CHANGE_TYPES and old_mode != new_mode:
            result.append(f"old mode {old_mode}")
            result.append(f"new mode {new_mode}")

        if change_type == ChangeType.COPY_HERE:
            result.append(f"copy from {old_path}")
            result.append(f"copy to {cur_path}")
        elif change_type == ChangeType.MOVE_HERE:
            result.append(f"rename from {old_path}")
            result.append(f"rename to {cur_path}")
        elif change_type in (ChangeType.DELETE, ChangeType.MULTICOPY):
            deleted_mode = change.old_properties.get(FILE_MODE_PROPERTY)
            if deleted_mode:
                result.append(f"deleted file mode {deleted_mode}")
        elif change_type not in PLAIN_HEADER_TYPES:
            raise ValueError(f"Unhandled change type {change_type!r}")

        if not is_binary:
            result.append(f"--- {old_target}")
            result.append(f"+++ {cur_target}")

        if change_body:
            result.append(change_body)

        return "\n".join(result)

    def build_binary_change(self, change: Change) -> str:
        if change.change_type == ChangeType.ADD:
            old_data = None
        else:
            old_data = self._load_side(change, OLD_BINARY_PHID, "old")

        if change.change_type == ChangeType.DELETE:
            new_data = None
        else:
            new_data = self._load_side(change, NEW_BINARY_PHID, "new")

        return encode_binary_change(old_data, new_data)

    def _load_side(self, change: Change, key: str, side: str) -> bytes:
        phid = change.get_metadata(key)
        if not phid:
            raise missing_blob_reference(
                change.current_path or change.old_path, side
            )
        return self.get_blob(phid)
