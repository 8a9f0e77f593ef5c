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

import subprocess
from pathlib import Path

from loguru import logger

from .interface import ArchiveInterface


class SubprocessTarInterface(ArchiveInterface):
    def __init__(self, tar_executable: str = "tar") -> None:
        self.tar_executable = tar_executable

    def pack(self, source_dir: str | Path, archive_path: str | Path) -> bool:
        source_dir = Path(source_dir)
        members = sorted(entry.name for entry in source_dir.iterdir())
        archive_path = Path(archive_path).resolve()
        result = self.run_tar(["-czf", str(archive_path), *members], cwd=source_dir)
        return result is not None

    def extract_all(self, archive_path: str | Path, dest_dir: str | Path) -> bool:
        result = self.run_tar(["-xf", str(archive_path), "-C", str(dest_dir)])
        return result is not None

    def read_member(self, archive_path: str | Path, member: str) -> bytes | None:
        result = self.run_tar(["-xOf", str(archive_path), member])
        return result.stdout if result else None

    def run_tar(
        self,
        args: list[str],
        cwd: str | Path | None = None,
    ) -> subprocess.CompletedProcess[bytes] | None:
        cmd = [self.tar_executable] + args
        try:
            logger.debug(f"Running tar command: {' '.join(cmd)} cwd={cwd}")
            result = subprocess.run(
                cmd,
                text=False,
                capture_output=True,
                check=True,
                cwd=str(cwd) if cwd is not None else None,
            )
            if result.stdout:
                logger.debug(f"tar stdout (binary length): {len(result.stdout)} bytes")
            if result.stderr:
                logger.debug(
                    f"tar stderr: {result.stderr[:2000]!r}"
                    + ("...(truncated)" if len(result.stderr) > 2000 else "")
                )
            return result
        except subprocess.CalledProcessError as e:
            logger.warning(
                f"Tar command failed: {' '.join(e.cmd)} code={e.returncode} stderr={e.stderr.decode('utf-8', errors='ignore')}"
            )
            return None
        except OSError as e:
            logger.warning(f"Could not run {self.tar_executable}: {e}")
            return None
