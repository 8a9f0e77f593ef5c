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

from abc import ABC, abstractmethod
from collections.abc import Sequence

from patchbundle.core.data.change import Change, ChangeType
from patchbundle.core.data.hunk import Hunk
from patchbundle.core.diff.hunk_splitter import DEFAULT_CONTEXT, split_hunk

DEV_NULL = "/dev/null"


class DiffGenerator(ABC):
    """Shared path rules and hunk rendering for the text patch formats."""

    def __init__(self, context: int = DEFAULT_CONTEXT):
        self.context = context

    @abstractmethod
    def generate_diff(self, changes: Sequence[Change]) -> str:
        pass

    @staticmethod
    def get_old_path(change: Change) -> str | None:
        if not change.old_path or change.change_type == ChangeType.ADD:
            return None
        return change.old_path

    @staticmethod
    def get_current_path(change: Change) -> str | None:
        if not change.current_path or change.change_type in (
            ChangeType.DELETE,
            ChangeType.MULTICOPY,
        ):
            return None
        return change.current_path

    def build_hunk_changes(self, hunks: Sequence[Hunk]) -> str:
        result = []
        for hunk in hunks:
            for small_hunk in split_hunk(hunk, self.context):
                result.append(small_hunk.header)
                result.append(small_hunk.corpus)

        return "\n".join(result)
