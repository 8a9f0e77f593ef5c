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

from .bundle import Bundle
from .core.blobs.blob_source import ArchiveBlobSource, BlobSource, NoBlobSource
from .core.blobs.conduit_blob_source import ConduitBlobSource
from .core.data.change import Change, ChangeType, FileType
from .core.data.hunk import Hunk
from .core.diff.binary_patch import encode_binary_change
from .core.diff.hunk_splitter import split_hunk
from .core.exceptions import (
    ArchiveError,
    MalformedHunkError,
    MissingBlobSourceError,
    PatchBundleError,
    RemoteFetchError,
)
from .core.parsing.diff_parser import parse_diff

__all__ = [
    "ArchiveBlobSource",
    "ArchiveError",
    "BlobSource",
    "Bundle",
    "Change",
    "ChangeType",
    "ConduitBlobSource",
    "FileType",
    "Hunk",
    "MalformedHunkError",
    "MissingBlobSourceError",
    "NoBlobSource",
    "PatchBundleError",
    "RemoteFetchError",
    "encode_binary_change",
    "parse_diff",
    "split_hunk",
]
