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

import base64
import binascii

import requests
from loguru import logger

from patchbundle.core.exceptions import RemoteFetchError


class ConduitBlobSource:
    """
    Downloads blobs through Phabricator's conduit `file.download` method.

    The method answers with a JSON envelope whose `result` is the file
    content in base64; a non-null `error_code` marks a failed call.
    """

    def __init__(
        self,
        uri: str,
        token: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ):
        self.uri = uri.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.uri}/api/file.download"

    def fetch(self, phid: str) -> bytes:
        logger.info("Downloading binary data...")
        logger.debug(f"Fetching {phid} from {self.endpoint}")

        params = {"phid": phid}
        if self.token:
            params["api.token"] = self.token

        try:
            response = self.session.post(
                self.endpoint, data=params, timeout=self.timeout
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise RemoteFetchError(
                f"Failed to download blob '{phid}'", phid, str(e)
            ) from e
        except ValueError as e:
            raise RemoteFetchError(
                f"Malformed response while downloading blob '{phid}'", phid, str(e)
            ) from e

        if not isinstance(payload, dict):
            raise RemoteFetchError(
                f"Malformed response while downloading blob '{phid}'",
                phid,
                f"Expected a JSON object, got {type(payload).__name__}",
            )

        if payload.get("error_code"):
            raise RemoteFetchError(
                f"Conduit refused to return blob '{phid}'",
                phid,
                f"{payload.get('error_code')}: {payload.get('error_info')}",
            )

        result = payload.get("result")
        if not isinstance(result, str):
            raise RemoteFetchError(
                f"Malformed response while downloading blob '{phid}'",
                phid,
                "Missing base64 result",
            )

        try:
            data = base64.b64decode(result, validate=True)
        except binascii.Error as e:
            raise RemoteFetchError(
                f"Blob '{phid}' is not valid base64", phid, str(e)
            ) from e

        logger.debug(f"Downloaded {phid}: {len(data)} bytes")
        return data
