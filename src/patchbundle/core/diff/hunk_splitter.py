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

from itertools import accumulate

from patchbundle.core.data.hunk import (
    NO_NEWLINE_PREFIX,
    Hunk,
    is_changed_line,
    is_new_line,
    is_old_line,
)

DEFAULT_CONTEXT = 3


def split_hunk(hunk: Hunk, context: int = DEFAULT_CONTEXT) -> list[Hunk]:
    """
    Break one (possibly huge) hunk into the smallest hunks that keep `context`
    lines of context around every run of changes.

    Runs of changes separated by at most `context * 2` unchanged lines are
    merged into one hunk. Splitting any earlier would let two neighbouring
    hunks share context lines, and git refuses to apply overlapping hunks.

    Every emitted hunk has offsets and lengths that are valid on their own,
    so the results can be written out in order as separate @@ sections.
    A hunk without any changed line produces no hunks.
    """
    lines = hunk.lines
    n = len(lines)

    # old/new lines seen before index i
    old_before = [0, *accumulate(1 if is_old_line(line) else 0 for line in lines)]
    new_before = [0, *accumulate(1 if is_new_line(line) else 0 for line in lines)]

    results: list[Hunk] = []
    ii = 0
    while ii < n:
        jj = ii
        while jj < n and not is_changed_line(lines[jj]):
            jj += 1
        if jj >= n:
            break

        hunk_start = max(jj - context, 0)

        last_change = jj
        while jj < n:
            if is_changed_line(lines[jj]):
                last_change = jj
            elif jj - last_change > context * 2:
                break
            jj += 1

        hunk_end = min(last_change + context + 1, n)
        # keep "\ No newline" with the line it describes
        while hunk_end < n and lines[hunk_end][0] == NO_NEWLINE_PREFIX:
            hunk_end += 1

        results.append(
            Hunk(
                old_offset=hunk.old_offset + old_before[hunk_start],
                new_offset=hunk.new_offset + new_before[hunk_start],
                old_length=old_before[hunk_end] - old_before[hunk_start],
                new_length=new_before[hunk_end] - new_before[hunk_start],
                corpus="\n".join(lines[hunk_start:hunk_end]),
            )
        )

        ii = jj

    return results
