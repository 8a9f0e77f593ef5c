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

import pytest

from patchbundle.core.data.change import (
    FILE_MODE_PROPERTY,
    NEW_BINARY_PHID,
    OLD_BINARY_PHID,
    Change,
    ChangeType,
    FileType,
)
from patchbundle.core.data.hunk import Hunk, split_corpus
from patchbundle.core.exceptions import MalformedHunkError

# -----------------------------------------------------------------------------
# Corpus parsing
# -----------------------------------------------------------------------------


def test_split_corpus_empty():
    assert split_corpus("") == []


def test_split_corpus_ignores_single_trailing_newline():
    assert split_corpus(" a\n-b\n+c\n") == [" a", "-b", "+c"]


@pytest.mark.parametrize("corpus", [" a\n\n+b", "xa", " a\n\n", "+a\nb"])
def test_split_corpus_rejects_malformed_lines(corpus):
    with pytest.raises(MalformedHunkError):
        split_corpus(corpus)


def test_split_corpus_accepts_no_newline_marker():
    lines = split_corpus("-a\n\\ No newline at end of file\n+b")
    assert lines[1].startswith("\\")


# -----------------------------------------------------------------------------
# Hunk
# -----------------------------------------------------------------------------


def test_from_corpus_counts_lengths():
    hunk = Hunk.from_corpus(4, 4, " a\n-b\n+c\n+d\n\\ No newline at end of file")

    assert hunk.old_length == 2
    assert hunk.new_length == 3
    assert hunk.add_lines == 2
    assert hunk.del_lines == 1
    assert hunk.header == "@@ -4,2 +4,3 @@"


def test_hunk_dict_uses_archive_keys():
    hunk = Hunk(1, 2, 1, 1, "-a\n+b")
    data = hunk.to_dict()

    assert data == {
        "oldOffset": 1,
        "newOffset": 2,
        "oldLength": 1,
        "newLength": 1,
        "addLines": 1,
        "delLines": 1,
        "corpus": "-a\n+b",
    }
    assert Hunk.from_dict(data) == hunk


# -----------------------------------------------------------------------------
# Change
# -----------------------------------------------------------------------------


def test_change_defaults():
    change = Change(ChangeType.MODIFY, old_path="a", current_path="a")

    assert change.old_mode == "100644"
    assert change.new_mode == "100644"
    assert not change.is_binary
    assert change.binary_phids() == []


def test_change_binary_phids_old_first():
    change = Change(
        ChangeType.MODIFY,
        FileType.IMAGE,
        metadata={NEW_BINARY_PHID: "PHID-new", OLD_BINARY_PHID: "PHID-old"},
    )

    assert change.is_binary
    assert change.binary_phids() == ["PHID-old", "PHID-new"]


def test_change_from_dict_accepts_empty_lists_for_maps():
    change = Change.from_dict(
        {
            "oldPath": None,
            "currentPath": "x.txt",
            "awayPaths": [],
            "oldProperties": [],
            "newProperties": {FILE_MODE_PROPERTY: "100755"},
            "type": 1,
            "fileType": 1,
            "commitHash": None,
            "metadata": [],
            "hunks": [],
        }
    )

    assert change.change_type == ChangeType.ADD
    assert change.old_properties == {}
    assert change.metadata == {}
    assert change.new_mode == "100755"


def test_change_dict_round_trip():
    change = Change(
        ChangeType.MOVE_HERE,
        old_path="a.txt",
        current_path="b.txt",
        old_properties={FILE_MODE_PROPERTY: "100644"},
        new_properties={FILE_MODE_PROPERTY: "100755"},
        hunks=[Hunk(1, 1, 1, 1, "-x\n+y")],
        away_paths=["c.txt"],
        commit_hash="abc123",
    )

    data = change.to_dict()
    assert data["type"] == 6
    assert data["fileType"] == 1
    assert Change.from_dict(data) == change
