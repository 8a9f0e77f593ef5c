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

from abc import ABC, abstractmethod
from pathlib import Path


class ArchiveInterface(ABC):
    """
    Abstract interface for packing and unpacking bundle archives.
    This abstracts away the details of which external tool does the work.
    """

    @abstractmethod
    def pack(self, source_dir: str | Path, archive_path: str | Path) -> bool:
        """Pack every entry of source_dir into archive_path. Returns False on error."""

    @abstractmethod
    def extract_all(self, archive_path: str | Path, dest_dir: str | Path) -> bool:
        """Unpack the whole archive into dest_dir. Returns False on error."""

    @abstractmethod
    def read_member(self, archive_path: str | Path, member: str) -> bytes | None:
        """Return the contents of one archive entry. Returns None on error."""
