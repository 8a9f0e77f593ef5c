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

from collections.abc import Sequence

from loguru import logger

from patchbundle.core.data.change import Change
from patchbundle.core.diff.diff_generator import DEV_NULL, DiffGenerator

INDEX_SEPARATOR = "=" * 67


class UnifiedDiffGenerator(DiffGenerator):
    """Renders changes as a plain unified diff, as consumed by `patch`."""

    def generate_diff(self, changes: Sequence[Change]) -> str:
        result = []
        for change in changes:
            old_path = self.get_old_path(change)
            cur_path = self.get_current_path(change)

            index_path = cur_path if cur_path is not None else old_path
            result.append(f"Index: {index_path}")
            result.append(INDEX_SEPARATOR)

            if old_path is None:
                old_path = DEV_NULL
            if cur_path is None:
                cur_path = DEV_NULL

            # `patch` edits the file named on the --- line unless it is
            # /dev/null, so a moved or copied file is listed under its new
            # path on both lines. The rename itself is not representable.
            if cur_path != DEV_NULL and old_path != DEV_NULL:
                old_path = cur_path

            result.append(f"--- {old_path}")
            result.append(f"+++ {cur_path}")

            body = self.build_hunk_changes(change.hunks)
            if body:
                result.append(body)

        logger.debug("Rendered unified diff for {count} changes", count=len(changes))
        return "\n".join(result) + "\n"
