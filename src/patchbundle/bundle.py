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
from pathlib import Path

from loguru import logger

from patchbundle.core.archive.bundle_serializer import BundleSerializer
from patchbundle.core.archive_interface.interface import ArchiveInterface
from patchbundle.core.archive_interface.SubprocessTarInterface import (
    SubprocessTarInterface,
)
from patchbundle.core.blobs.blob_source import (
    ArchiveBlobSource,
    BlobSource,
    FallbackBlobSource,
    select_blob_source,
)
from patchbundle.core.data.change import Change
from patchbundle.core.diff.git_patch_generator import GitPatchGenerator
from patchbundle.core.diff.hunk_splitter import DEFAULT_CONTEXT
from patchbundle.core.diff.unified_diff_generator import UnifiedDiffGenerator
from patchbundle.core.logging.utils import log_changes
from patchbundle.core.parsing.diff_parser import parse_diff


class Bundle:
    """
    A changeset plus the means to resolve the binary blobs it references.

    Build one with from_changes(), from_diff() or from_archive(). The change
    list never changes afterwards; fetched blobs are cached per bundle.
    """

    def __init__(
        self,
        changes: Sequence[Change],
        blob_source: BlobSource | None = None,
        archive_path: Path | None = None,
        archiver: ArchiveInterface | None = None,
    ):
        self._changes = tuple(changes)
        self._blob_source = select_blob_source(blob_source)
        self._blobs: dict[str, bytes] = {}
        self.archive_path = archive_path
        self.archiver = archiver or SubprocessTarInterface()

    @classmethod
    def from_changes(
        cls,
        changes: Sequence[Change],
        remote_source: BlobSource | None = None,
        archiver: ArchiveInterface | None = None,
    ) -> "Bundle":
        return cls(changes, blob_source=remote_source, archiver=archiver)

    @classmethod
    def from_diff(
        cls,
        text: str,
        remote_source: BlobSource | None = None,
        archiver: ArchiveInterface | None = None,
    ) -> "Bundle":
        return cls(parse_diff(text), blob_source=remote_source, archiver=archiver)

    @classmethod
    def from_archive(
        cls,
        path: str | Path,
        remote_source: BlobSource | None = None,
        archiver: ArchiveInterface | None = None,
    ) -> "Bundle":
        """
        Load a bundle written by write_to_disk().

        Blobs are read from the archive's own blob table. When `remote_source`
        is given it serves any blob the archive does not carry.
        """
        path = Path(path).resolve()
        archiver = archiver or SubprocessTarInterface()
        changes = BundleSerializer(archiver).read(path)
        blob_source = ArchiveBlobSource(path, archiver)
        if remote_source is not None:
            blob_source = FallbackBlobSource(blob_source, remote_source)

        return cls(
            changes,
            blob_source=blob_source,
            archive_path=path,
            archiver=archiver,
        )

    @property
    def changes(self) -> tuple[Change, ...]:
        return self._changes

    def get_blob(self, phid: str) -> bytes:
        if phid not in self._blobs:
            self._blobs[phid] = self._blob_source.fetch(phid)
            logger.debug(f"Cached blob {phid} ({len(self._blobs[phid])} bytes)")
        return self._blobs[phid]

    def to_unified_diff(self, context: int = DEFAULT_CONTEXT) -> str:
        log_changes("Unified diff", self._changes)
        return UnifiedDiffGenerator(context).generate_diff(self._changes)

    def to_git_patch(self, context: int = DEFAULT_CONTEXT) -> str:
        log_changes("Git patch", self._changes)
        return GitPatchGenerator(self.get_blob, context).generate_diff(self._changes)

    def write_to_disk(self, path: str | Path) -> None:
        log_changes("Write archive", self._changes)
        BundleSerializer(self.archiver).write(self._changes, path, self.get_blob)
