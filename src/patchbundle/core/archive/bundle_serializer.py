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
Reading and writing bundle archives.

An archive is a gzip'd tar holding:

    changes.json     the change list, each hunk corpus replaced by an index
    hunks/<index>    one file per hunk corpus, in encounter order
    blobs/<phid>     one file per distinct binary blob
"""

import json
import shutil
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

from loguru import logger

from patchbundle.core.archive_interface.interface import ArchiveInterface
from patchbundle.core.archive_interface.SubprocessTarInterface import (
    SubprocessTarInterface,
)
from patchbundle.core.blobs.blob_source import BLOBS_DIR
from patchbundle.core.data.change import Change
from patchbundle.core.exceptions import (
    ArchiveError,
    archive_command_failed,
    archive_entry_missing,
)
from patchbundle.core.logging.utils import time_block

CHANGES_FILE = "changes.json"
HUNKS_DIR = "hunks"


def extract_hunk_corpora(change_list: list[dict]) -> list[str]:
    """
    Replace every hunk corpus in `change_list` (in place) with its index into
    the returned list of corpora.
    """
    hunks = []
    for change in change_list:
        for hunk in change["hunks"]:
            hunks.append(hunk["corpus"])
            hunk["corpus"] = len(hunks) - 1
    return hunks


def collect_blob_phids(changes: Sequence[Change]) -> list[str]:
    """Distinct binary phids referenced by the changes, in encounter order."""
    phids = {}
    for change in changes:
        for phid in change.binary_phids():
            phids[phid] = None
    return list(phids)


def _check_entry_name(name: str) -> str:
    if not name or "/" in name or "\\" in name or name in (".", ".."):
        raise ArchiveError(
            f"Refusing to use '{name}' as an archive entry name",
            "Blob identifiers must be plain file names",
        )
    return name


class BundleSerializer:
    def __init__(self, archiver: ArchiveInterface | None = None):
        self.archiver = archiver or SubprocessTarInterface()

    def write(
        self,
        changes: Sequence[Change],
        path: str | Path,
        get_blob: Callable[[str], bytes],
    ) -> None:
        """
        Write `changes` and every blob they reference to an archive at `path`.

        Blobs are resolved before anything touches the disk, so a missing
        blob leaves no partial archive behind.
        """
        path = Path(path)
        change_list = [change.to_dict() for change in changes]
        hunks = extract_hunk_corpora(change_list)
        blobs = {
            _check_entry_name(phid): get_blob(phid)
            for phid in collect_blob_phids(changes)
        }

        staging_dir = Path(tempfile.mkdtemp(prefix="patchbundle-"))
        try:
            (staging_dir / HUNKS_DIR).mkdir()
            (staging_dir / BLOBS_DIR).mkdir()
            (staging_dir / CHANGES_FILE).write_text(
                json.dumps(change_list), encoding="utf-8"
            )
            for key, hunk in enumerate(hunks):
                (staging_dir / HUNKS_DIR / str(key)).write_bytes(hunk.encode("utf-8"))
            for phid, blob in blobs.items():
                (staging_dir / BLOBS_DIR / phid).write_bytes(blob)

            with time_block(f"Packing {path}"):
                if not self.archiver.pack(staging_dir, path):
                    raise archive_command_failed("write", str(path))
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

        logger.debug(
            "Wrote {path}: changes={changes} hunks={hunks} blobs={blobs}",
            path=str(path),
            changes=len(change_list),
            hunks=len(hunks),
            blobs=len(blobs),
        )

    def read(self, path: str | Path) -> list[Change]:
        """Load the change list stored in the archive at `path`."""
        path = Path(path)

        with tempfile.TemporaryDirectory(prefix="patchbundle-") as tmp:
            unpack_dir = Path(tmp)
            with time_block(f"Unpacking {path}"):
                if not self.archiver.extract_all(path, unpack_dir):
                    raise archive_command_failed("read", str(path))

            changes_file = unpack_dir / CHANGES_FILE
            if not changes_file.is_file():
                raise archive_entry_missing(str(path), CHANGES_FILE)

            try:
                change_list = json.loads(changes_file.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise ArchiveError(
                    f"Archive '{path}' has a corrupt {CHANGES_FILE}", str(e)
                ) from e

            if not isinstance(change_list, list):
                raise ArchiveError(
                    f"Archive '{path}' has a corrupt {CHANGES_FILE}",
                    f"Expected a list of changes, got {type(change_list).__name__}",
                )

            changes = [
                self._load_change(path, unpack_dir, position, change)
                for position, change in enumerate(change_list)
            ]

        logger.debug(f"Loaded {len(changes)} changes from {path}")
        return changes

    @staticmethod
    def _load_change(path: Path, unpack_dir: Path, position: int, change) -> Change:
        """Inline the hunk corpora of one changes.json entry and type it."""
        if not isinstance(change, dict):
            raise ArchiveError(
                f"Archive '{path}' has a corrupt {CHANGES_FILE}",
                f"Change {position} is a {type(change).__name__}, not an object",
            )

        try:
            for hunk in change.get("hunks") or []:
                index = int(hunk["corpus"])
                hunk_file = unpack_dir / HUNKS_DIR / str(index)
                if not hunk_file.is_file():
                    raise archive_entry_missing(str(path), f"{HUNKS_DIR}/{index}")
                hunk["corpus"] = hunk_file.read_bytes().decode(
                    "utf-8", errors="replace"
                )
            return Change.from_dict(change)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise ArchiveError(
                f"Archive '{path}' has a corrupt {CHANGES_FILE}",
                f"Change {position}: {e}",
            ) from e
