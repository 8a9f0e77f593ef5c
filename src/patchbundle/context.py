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

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from patchbundle.core.archive_interface.interface import ArchiveInterface
from patchbundle.core.archive_interface.SubprocessTarInterface import (
    SubprocessTarInterface,
)
from patchbundle.core.blobs.blob_source import BlobSource
from patchbundle.core.blobs.conduit_blob_source import ConduitBlobSource
from patchbundle.core.diff.hunk_splitter import DEFAULT_CONTEXT


class GlobalConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    context_lines: int = Field(
        DEFAULT_CONTEXT,
        ge=0,
        description="Lines of context kept around each change when re-splitting hunks",
    )
    conduit_uri: str | None = Field(
        None, description="Base URI of the conduit server binary blobs are downloaded from"
    )
    conduit_token: str | None = Field(None, description="Conduit API token")
    conduit_timeout: float | None = Field(
        60.0, gt=0, description="Seconds to wait for a blob download"
    )
    tar_executable: str = Field("tar", description="tar binary used to (un)pack archives")
    verbose: bool = Field(False, description="Enable verbose logging output")
    silent: bool = Field(False, description="Do not log to the console")


@dataclass(frozen=True)
class GlobalContext:
    config: GlobalConfig
    archiver: ArchiveInterface
    remote_source: BlobSource | None

    @classmethod
    def from_global_config(cls, config: GlobalConfig):
        archiver = SubprocessTarInterface(config.tar_executable)

        if config.conduit_uri:
            remote_source = ConduitBlobSource(
                config.conduit_uri,
                token=config.conduit_token,
                timeout=config.conduit_timeout,
            )
        else:
            remote_source = None

        return GlobalContext(config, archiver, remote_source)
