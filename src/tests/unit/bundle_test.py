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

from unittest.mock import Mock

import pytest

from patchbundle.bundle import Bundle
from patchbundle.core.data.change import NEW_BINARY_PHID, Change, ChangeType, FileType
from patchbundle.core.data.hunk import Hunk
from patchbundle.core.exceptions import ArchiveError, MissingBlobSourceError

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def binary_change():
    return Change(
        ChangeType.ADD,
        FileType.BINARY,
        current_path="img.bin",
        metadata={NEW_BINARY_PHID: "PHID-FILE-img"},
    )


@pytest.fixture
def text_change():
    return Change(
        ChangeType.MODIFY,
        old_path="a.txt",
        current_path="a.txt",
        hunks=[Hunk(1, 1, 1, 1, "-old\n+new")],
    )


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------


def test_changes_are_immutable_sequence(text_change):
    source = [text_change]
    bundle = Bundle.from_changes(source)
    source.append(text_change)

    assert bundle.changes == (text_change,)


def test_from_diff():
    bundle = Bundle.from_diff("--- a.txt\n+++ a.txt\n@@ -1 +1 @@\n-old\n+new\n")

    assert len(bundle.changes) == 1
    assert bundle.changes[0].hunks[0].corpus == "-old\n+new"


# -----------------------------------------------------------------------------
# Blobs
# -----------------------------------------------------------------------------


def test_blobs_are_fetched_once(dict_blob_source):
    source = dict_blob_source({"PHID-1": b"data"})
    bundle = Bundle.from_changes([], remote_source=source)

    assert bundle.get_blob("PHID-1") == b"data"
    assert bundle.get_blob("PHID-1") == b"data"
    assert source.fetched == ["PHID-1"]


def test_missing_blob_source(binary_change):
    bundle = Bundle.from_changes([binary_change])

    with pytest.raises(MissingBlobSourceError, match="PHID-FILE-img"):
        bundle.to_git_patch()


def test_unified_diff_needs_no_blobs(binary_change, text_change):
    bundle = Bundle.from_changes([text_change, binary_change])

    text = bundle.to_unified_diff()
    assert "Index: a.txt" in text
    assert "Index: img.bin" in text


def test_archive_round_trip_uses_archive_blobs(
    archiver, binary_change, text_change, tmp_path, dict_blob_source
):
    remote = dict_blob_source({"PHID-FILE-img": b"\x00\x01\x02"})
    path = tmp_path / "b.arcbundle"

    original = Bundle.from_changes([text_change, binary_change], remote, archiver)
    original.write_to_disk(path)
    expected_patch = original.to_git_patch()

    other_remote = Mock()
    loaded = Bundle.from_archive(path, remote_source=other_remote, archiver=archiver)

    assert loaded.changes == original.changes
    assert loaded.archive_path == path.resolve()
    assert loaded.to_git_patch() == expected_patch
    other_remote.fetch.assert_not_called()


def test_archive_without_blob_falls_back_to_remote(
    archiver, binary_change, tmp_path, dict_blob_source
):
    path = tmp_path / "b.arcbundle"
    Bundle.from_changes(
        [binary_change], dict_blob_source({"PHID-FILE-img": b"\x00\x01\x02"}), archiver
    ).write_to_disk(path)
    del archiver.archives[str(path.resolve())]["blobs/PHID-FILE-img"]

    with pytest.raises(ArchiveError, match="blobs/PHID-FILE-img"):
        Bundle.from_archive(path, archiver=archiver).get_blob("PHID-FILE-img")

    remote = dict_blob_source({"PHID-FILE-img": b"\x00\x01\x02"})
    loaded = Bundle.from_archive(path, remote_source=remote, archiver=archiver)

    assert loaded.get_blob("PHID-FILE-img") == b"\x00\x01\x02"
    assert remote.fetched == ["PHID-FILE-img"]


def test_write_resolves_blobs_through_cache(archiver, binary_change, tmp_path, dict_blob_source):
    remote = dict_blob_source({"PHID-FILE-img": b"png"})
    bundle = Bundle.from_changes([binary_change], remote, archiver)

    bundle.to_git_patch()
    bundle.write_to_disk(tmp_path / "b.arcbundle")

    assert remote.fetched == ["PHID-FILE-img"]


def test_context_is_passed_through():
    corpus = "\n".join([" a", " b", "-c", " d", " e"])
    change = Change(
        ChangeType.MODIFY,
        old_path="f",
        current_path="f",
        hunks=[Hunk.from_corpus(1, 1, corpus)],
    )
    bundle = Bundle.from_changes([change])

    assert "@@ -3,1 +3,0 @@\n-c\n" in bundle.to_unified_diff(context=0)
    assert "@@ -2,3 +2,2 @@\n b\n-c\n d\n" in bundle.to_git_patch(context=1)
