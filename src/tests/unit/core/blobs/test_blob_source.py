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
from unittest.mock import Mock

import pytest
import requests

from patchbundle.core.blobs.blob_source import (
    ArchiveBlobSource,
    FallbackBlobSource,
    NoBlobSource,
    select_blob_source,
)
from patchbundle.core.blobs.conduit_blob_source import ConduitBlobSource
from patchbundle.core.exceptions import (
    ArchiveError,
    MissingBlobSourceError,
    RemoteFetchError,
)

# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


def make_response(payload):
    response = Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def conduit(session):
    return ConduitBlobSource(
        "https://phab.example.com/", token="api-secret", timeout=5, session=session
    )


# -----------------------------------------------------------------------------
# Local sources
# -----------------------------------------------------------------------------


def test_no_blob_source_always_raises():
    with pytest.raises(MissingBlobSourceError, match="Nowhere to load blob 'PHID-1' from"):
        NoBlobSource().fetch("PHID-1")


def test_archive_blob_source_reads_blob_table(archiver, tmp_path):
    path = tmp_path / "b.arcbundle"
    archiver.archives[str(path.resolve())] = {"blobs/PHID-1": b"\x00data"}
    source = ArchiveBlobSource(path, archiver)

    assert source.fetch("PHID-1") == b"\x00data"
    with pytest.raises(ArchiveError, match="blobs/PHID-2"):
        source.fetch("PHID-2")


def test_select_blob_source_prefers_first_configured():
    first, second = Mock(), Mock()

    assert select_blob_source(None, first, second) is first
    assert isinstance(select_blob_source(None, None), NoBlobSource)
    assert isinstance(select_blob_source(), NoBlobSource)


def test_fallback_prefers_earlier_source(dict_blob_source):
    first = dict_blob_source({"PHID-1": b"first"})
    second = dict_blob_source({"PHID-1": b"second", "PHID-2": b"only second"})
    source = FallbackBlobSource(first, second)

    assert source.fetch("PHID-1") == b"first"
    assert second.fetched == []
    assert source.fetch("PHID-2") == b"only second"
    assert first.fetched == ["PHID-1", "PHID-2"]


def test_fallback_moves_past_archive_miss(archiver, tmp_path, dict_blob_source):
    path = tmp_path / "b.arcbundle"
    archiver.archives[str(path.resolve())] = {}
    remote = dict_blob_source({"PHID-1": b"remote"})

    assert FallbackBlobSource(ArchiveBlobSource(path, archiver), remote).fetch("PHID-1") == b"remote"


def test_fallback_raises_last_error(dict_blob_source):
    failing_remote = Mock()
    failing_remote.fetch.side_effect = RemoteFetchError("Failed to download blob", phid="PHID-1")
    source = FallbackBlobSource(dict_blob_source({}), failing_remote)

    with pytest.raises(RemoteFetchError):
        source.fetch("PHID-1")


def test_fallback_does_not_swallow_remote_errors_from_earlier_sources(dict_blob_source):
    failing_remote = Mock()
    failing_remote.fetch.side_effect = RemoteFetchError("Failed to download blob", phid="PHID-1")
    last = dict_blob_source({"PHID-1": b"x"})

    with pytest.raises(RemoteFetchError):
        FallbackBlobSource(failing_remote, last).fetch("PHID-1")
    assert last.fetched == []


def test_fallback_needs_a_source():
    with pytest.raises(ValueError):
        FallbackBlobSource()


# -----------------------------------------------------------------------------
# Conduit
# -----------------------------------------------------------------------------


def test_conduit_fetch(conduit, session):
    session.post.return_value = make_response(
        {"result": base64.b64encode(b"\x89PNG").decode(), "error_code": None}
    )

    assert conduit.fetch("PHID-FILE-1") == b"\x89PNG"
    session.post.assert_called_once_with(
        "https://phab.example.com/api/file.download",
        data={"phid": "PHID-FILE-1", "api.token": "api-secret"},
        timeout=5,
    )


def test_conduit_without_token(session):
    session.post.return_value = make_response({"result": ""})

    assert ConduitBlobSource("https://phab", session=session).fetch("P") == b""
    assert session.post.call_args.kwargs["data"] == {"phid": "P"}


def test_conduit_error_code(conduit, session):
    session.post.return_value = make_response(
        {"result": None, "error_code": "ERR-CONDUIT-CORE", "error_info": "No such file"}
    )

    with pytest.raises(RemoteFetchError) as excinfo:
        conduit.fetch("PHID-FILE-1")

    assert excinfo.value.phid == "PHID-FILE-1"
    assert "ERR-CONDUIT-CORE" in excinfo.value.details


def test_conduit_transport_failure(conduit, session):
    session.post.side_effect = requests.ConnectionError("refused")

    with pytest.raises(RemoteFetchError, match="Failed to download"):
        conduit.fetch("PHID-FILE-1")


def test_conduit_http_error(conduit, session):
    response = make_response({})
    response.raise_for_status.side_effect = requests.HTTPError("500")
    session.post.return_value = response

    with pytest.raises(RemoteFetchError):
        conduit.fetch("PHID-FILE-1")


def test_conduit_invalid_json(conduit, session):
    response = make_response(None)
    response.json.side_effect = ValueError("Expecting value")
    session.post.return_value = response

    with pytest.raises(RemoteFetchError, match="Malformed response"):
        conduit.fetch("PHID-FILE-1")


@pytest.mark.parametrize("payload", [[], {"result": None}, {"result": 12}])
def test_conduit_malformed_payload(conduit, session, payload):
    session.post.return_value = make_response(payload)

    with pytest.raises(RemoteFetchError, match="Malformed response"):
        conduit.fetch("PHID-FILE-1")


def test_conduit_invalid_base64(conduit, session):
    session.post.return_value = make_response({"result": "not base64!"})

    with pytest.raises(RemoteFetchError, match="not valid base64"):
        conduit.fetch("PHID-FILE-1")
