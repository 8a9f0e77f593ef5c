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

from dataclasses import dataclass

from patchbundle.core.exceptions import malformed_hunk_line

CONTEXT_PREFIX = " "
REMOVED_PREFIX = "-"
ADDED_PREFIX = "+"
# "\ No newline at end of file"; counts toward neither side
NO_NEWLINE_PREFIX = "\\"

LINE_PREFIXES = frozenset(
    {CONTEXT_PREFIX, REMOVED_PREFIX, ADDED_PREFIX, NO_NEWLINE_PREFIX}
)


def is_changed_line(line: str) -> bool:
    return line[0] in (REMOVED_PREFIX, ADDED_PREFIX)


def is_old_line(line: str) -> bool:
    return line[0] in (CONTEXT_PREFIX, REMOVED_PREFIX)


def is_new_line(line: str) -> bool:
    return line[0] in (CONTEXT_PREFIX, ADDED_PREFIX)


def split_corpus(corpus: str) -> list[str]:
    """
    Split a hunk corpus into validated lines.

    A single trailing newline is ignored. Any empty line, or a line that does
    not start with one of the known prefixes, raises MalformedHunkError.
    """
    if not corpus:
        return []

    if corpus.endswith("\n"):
        corpus = corpus[:-1]

    lines = corpus.split("\n")
    for index, line in enumerate(lines):
        if not line or line[0] not in LINE_PREFIXES:
            raise malformed_hunk_line(line, index)

    return lines


@dataclass
class Hunk:
    """A contiguous region of change within one file."""

    old_offset: int
    new_offset: int
    old_length: int
    new_length: int
    corpus: str

    @property
    def lines(self) -> list[str]:
        return split_corpus(self.corpus)

    @property
    def add_lines(self) -> int:
        return sum(1 for line in self.lines if line[0] == ADDED_PREFIX)

    @property
    def del_lines(self) -> int:
        return sum(1 for line in self.lines if line[0] == REMOVED_PREFIX)

    @property
    def header(self) -> str:
        return (
            f"@@ -{self.old_offset},{self.old_length} "
            f"+{self.new_offset},{self.new_length} @@"
        )

    @classmethod
    def from_corpus(cls, old_offset: int, new_offset: int, corpus: str) -> "Hunk":
        """Build a hunk whose lengths are counted from its corpus."""
        lines = split_corpus(corpus)
        return cls(
            old_offset=old_offset,
            new_offset=new_offset,
            old_length=sum(1 for line in lines if is_old_line(line)),
            new_length=sum(1 for line in lines if is_new_line(line)),
            corpus=corpus,
        )

    def to_dict(self) -> dict:
        return {
            "oldOffset": self.old_offset,
            "newOffset": self.new_offset,
            "oldLength": self.old_length,
            "newLength": self.new_length,
            "addLines": self.add_lines,
            "delLines": self.del_lines,
            "corpus": self.corpus,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Hunk":
        return cls(
            old_offset=int(data.get("oldOffset", 0)),
            new_offset=int(data.get("newOffset", 0)),
            old_length=int(data.get("oldLength", 0)),
            new_length=int(data.get("newLength", 0)),
            corpus=data.get("corpus") or "",
        )
