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
from typing import Protocol

from loguru import logger

from patchbundle.core.archive_interface.interface import ArchiveInterface
from patchbundle.core.exceptions import (
    ArchiveError,
    MissingBlobSourceError,
    archive_entry_missing,
    no_blob_source,
)

BLOBS_DIR = "blobs"


class BlobSource(Protocol):
    """An interface for loading binary content by identifier."""

    def fetch(self, phid: str) -> bytes:
        """
        Returns the raw bytes stored under `phid`.

        Raises a PatchBundleError subclass when the blob cannot be loaded.
        """
        ...


class NoBlobSource:
    """Used when a bundle has neither an archive nor a remote to read from."""

    def fetch(self, phid: str) -> bytes:
        raise no_blob_source(phid)


class ArchiveBlobSource:
    """Reads blobs from the blobs/ table of an archive on disk."""

    def __init__(self, archive_path: str | Path, archiver: ArchiveInterface):
        self.archive_path = Path(archive_path)
        self.archiver = archiver

    def fetch(self, phid: str) -> bytes:
        member = f"{BLOBS_DIR}/{phid}"
        logger.debug(f"Reading {member} from {self.archive_path}")
        data = self.archiver.read_member(self.archive_path, member)
        if data is None:
            raise archive_entry_missing(str(self.archive_path), member)
        return data


def select_blob_source(*candidates: BlobSource | None) -> BlobSource:
    """The first configured source wins; NoBlobSource when none is."""
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return NoBlobSource()


class FallbackBlobSource:
    """
    Tries each source in order, moving on when one cannot supply the blob.

    The error raised by the last source is the one the caller sees.
    """

    def __init__(self, *sources: BlobSource):
        if not sources:
            raise ValueError("FallbackBlobSource needs at least one source")
        self.sources = sources

    def fetch(self, phid: str) -> bytes:
        *earlier, last = self.sources
        for source in earlier:
            try:
                return source.fetch(phid)
            except (ArchiveError, MissingBlobSourceError) as e:
                logger.debug(f"{type(source).__name__} has no {phid}: {e}")
        return last.fetch(phid)
