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

"""
Custom exception hierarchy for patchbundle.

Every error raised while rendering, archiving or loading a changeset derives
from PatchBundleError, which carries a user facing message and optional
technical details for the log file. None of these errors are retried; a
failure anywhere aborts the whole operation.
"""

import functools
import sys

from loguru import logger


class PatchBundleError(Exception):
    """
    Base exception for all patchbundle errors.
    """

    def __init__(self, message: str, details: str = None):
        """
        Initialize a PatchBundleError.

        Args:
            message: Main error message for the user
            details: Additional technical details for logging
        """
        self.message = message
        self.details = details
        super().__init__(message)


class MissingBlobSourceError(PatchBundleError):
    """
    Raised when binary content is needed but nothing can provide it.

    Either no blob source is configured for the bundle, or a binary change
    does not reference a blob for a side that must be rendered.
    """

    pass


class ArchiveError(PatchBundleError):
    """
    Errors related to the archive container.

    Raised when packing or unpacking fails, when the container is corrupt,
    or when an expected entry is missing.
    """

    pass


class RemoteFetchError(PatchBundleError):
    """
    Raised when the remote blob source fails or returns malformed data.
    """

    def __init__(self, message: str, phid: str, details: str = None):
        self.phid = phid
        super().__init__(message, details)


class MalformedHunkError(PatchBundleError):
    """
    Raised when a hunk corpus line is empty or lacks a known prefix.
    """

    pass


class ValidationError(PatchBundleError):
    """
    Input validation errors, such as missing input files.
    """

    pass


class ConfigurationError(PatchBundleError):
    """
    Configuration-related errors.

    Raised when configuration files are invalid or contain
    incompatible settings.
    """

    pass


# Convenience functions for creating common errors
def no_blob_source(phid: str) -> MissingBlobSourceError:
    """Create a MissingBlobSourceError for a blob nobody can load."""
    return MissingBlobSourceError(
        f"Nowhere to load blob '{phid}' from",
        "Load the bundle from an archive or configure a conduit URI to fetch binary data",
    )


def missing_blob_reference(path: str | None, side: str) -> MissingBlobSourceError:
    """Create a MissingBlobSourceError for a binary change without a phid."""
    return MissingBlobSourceError(
        f"Binary change '{path}' has no {side}:binary-phid",
        "Binary changes must reference their content through metadata",
    )


def archive_entry_missing(archive_path: str, member: str) -> ArchiveError:
    """Create an ArchiveError for an entry that is not in the archive."""
    return ArchiveError(
        f"Archive '{archive_path}' has no entry '{member}'",
        "The bundle is incomplete or was not written by patchbundle",
    )


def archive_command_failed(operation: str, archive_path: str) -> ArchiveError:
    """Create an ArchiveError for a failed tar invocation."""
    return ArchiveError(
        f"Failed to {operation} archive '{archive_path}'",
        "See the log file for the tar command output",
    )


def malformed_hunk_line(line: str, index: int) -> MalformedHunkError:
    """Create a MalformedHunkError for a corpus line with a bad prefix."""
    return MalformedHunkError(
        f"Malformed hunk line {index}: {line!r}",
        "Every hunk line must start with ' ', '-', '+' or '\\'",
    )


def path_not_found(path: str) -> ValidationError:
    """Create a ValidationError for non-existent paths."""
    return ValidationError(
        f"Path not found: {path}",
        "Please check that the path exists and is accessible",
    )


def handle_patchbundle_exception(func):
    """
    Decorator for CLI entry points: log PatchBundleErrors and exit with status 1.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except PatchBundleError as e:
            logger.error(e.message)
            if e.details:
                logger.debug(f"Details: {e.details}")
            sys.exit(1)

    return wrapper
