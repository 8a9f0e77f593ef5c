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

from patchbundle.core.archive_interface.interface import ArchiveInterface
from patchbundle.core.exceptions import no_blob_source


class InMemoryArchiver(ArchiveInterface):
    """Keeps packed archives in a dict instead of running tar."""

    def __init__(self):
        self.archives: dict[str, dict[str, bytes]] = {}
        self.packed_dirs: list[Path] = []
        self.fail_pack = False

    @staticmethod
    def _key(archive_path) -> str:
        return str(Path(archive_path).resolve())

    def pack(self, source_dir, archive_path) -> bool:
        if self.fail_pack:
            return False
        source_dir = Path(source_dir)
        self.packed_dirs.append(source_dir)
        self.archives[self._key(archive_path)] = {
            path.relative_to(source_dir).as_posix(): path.read_bytes()
            for path in source_dir.rglob("*")
            if path.is_file()
        }
        Path(archive_path).write_bytes(b"in-memory archive")
        return True

    def extract_all(self, archive_path, dest_dir) -> bool:
        members = self.archives.get(self._key(archive_path))
        if members is None:
            return False
        for name, data in members.items():
            target = Path(dest_dir) / name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        return True

    def read_member(self, archive_path, member) -> bytes | None:
        return self.archives.get(self._key(archive_path), {}).get(member)


class DictBlobSource:
    """Blob source backed by a dict; records every fetch."""

    def __init__(self, blobs: dict[str, bytes]):
        self.blobs = blobs
        self.fetched: list[str] = []

    def fetch(self, phid: str) -> bytes:
        self.fetched.append(phid)
        if phid not in self.blobs:
            raise no_blob_source(phid)
        return self.blobs[phid]


@pytest.fixture
def archiver():
    return InMemoryArchiver()


@pytest.fixture
def dict_blob_source():
    return DictBlobSource
