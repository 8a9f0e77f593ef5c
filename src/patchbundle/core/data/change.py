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

from dataclasses import dataclass, field
from enum import IntEnum

from patchbundle.core.data.hunk import Hunk

FILE_MODE_PROPERTY = "unix:filemode"
DEFAULT_FILE_MODE = "100644"

OLD_BINARY_PHID = "old:binary-phid"
NEW_BINARY_PHID = "new:binary-phid"


class ChangeType(IntEnum):
    """What happened to a file. Values are the ones stored in changes.json."""

    ADD = 1
    MODIFY = 2
    DELETE = 3
    MOVE_AWAY = 4
    COPY_AWAY = 5
    MOVE_HERE = 6
    COPY_HERE = 7
    MULTICOPY = 8
    MESSAGE = 9
    CHILD = 10


class FileType(IntEnum):
    """What kind of file changed."""

    TEXT = 1
    IMAGE = 2
    BINARY = 3
    DIRECTORY = 4
    SYMLINK = 5
    DELETED = 6
    NORMAL = 7
    SUBMODULE = 8


BINARY_FILE_TYPES = frozenset({FileType.BINARY, FileType.IMAGE})


def _as_mapping(value) -> dict:
    # PHP writers encode empty maps as []
    return dict(value) if isinstance(value, dict) else {}


@dataclass
class Change:
    """
    One file's modification.

    Paths are None when the file does not exist on that side. Binary and
    image changes carry no hunks; their content is referenced through the
    old:binary-phid / new:binary-phid metadata keys.
    """

    change_type: ChangeType
    file_type: FileType = FileType.TEXT
    old_path: str | None = None
    current_path: str | None = None
    old_properties: dict[str, str] = field(default_factory=dict)
    new_properties: dict[str, str] = field(default_factory=dict)
    metadata: dict[str, str] = field(default_factory=dict)
    hunks: list[Hunk] = field(default_factory=list)
    away_paths: list[str] = field(default_factory=list)
    commit_hash: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.file_type in BINARY_FILE_TYPES

    @property
    def old_mode(self) -> str:
        return self.old_properties.get(FILE_MODE_PROPERTY, DEFAULT_FILE_MODE)

    @property
    def new_mode(self) -> str:
        return self.new_properties.get(FILE_MODE_PROPERTY, DEFAULT_FILE_MODE)

    def get_metadata(self, key: str, default: str | None = None) -> str | None:
        return self.metadata.get(key, default)

    def binary_phids(self) -> list[str]:
        """Blob identifiers referenced by this change, old side first."""
        return [
            phid
            for phid in (
                self.metadata.get(OLD_BINARY_PHID),
                self.metadata.get(NEW_BINARY_PHID),
            )
            if phid
        ]

    def to_dict(self) -> dict:
        return {
            "oldPath": self.old_path,
            "currentPath": self.current_path,
            "awayPaths": list(self.away_paths),
            "oldProperties": dict(self.old_properties),
            "newProperties": dict(self.new_properties),
            "type": int(self.change_type),
            "fileType": int(self.file_type),
            "commitHash": self.commit_hash,
            "metadata": dict(self.metadata),
            "hunks": [hunk.to_dict() for hunk in self.hunks],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Change":
        return cls(
            change_type=ChangeType(int(data.get("type", ChangeType.MODIFY))),
            file_type=FileType(int(data.get("fileType", FileType.TEXT))),
            old_path=data.get("oldPath"),
            current_path=data.get("currentPath"),
            old_properties=_as_mapping(data.get("oldProperties")),
            new_properties=_as_mapping(data.get("newProperties")),
            metadata=_as_mapping(data.get("metadata")),
            hunks=[Hunk.from_dict(hunk) for hunk in data.get("hunks") or []],
            away_paths=list(data.get("awayPaths") or []),
            commit_hash=data.get("commitHash"),
        )
