"""Tests for the Convertio API client."""

import asyncio

import aiohttp
import pytest
from fakes import BASE_URL, FakeResponse, error, ok

from convertio_cli.api.client import ConvertioAPIClient
from convertio_cli.exceptions import (
    DecodeError,
    LocalIOError,
    RemoteRejection,
    TransportError,
)
from convertio_cli.models.session import ConversionSession, SessionState
from convertio_cli.utils.codec import encode

STATUS_URL = f"{BASE_URL}/conv1/status"
DOWNLOAD_URL = f"{BASE_URL}/conv1/dl/base64"


@pytest.fixture
def session(tmp_path):
    return ConversionSession(
        id="conv1", source_path=str(tmp_path / "a.jpg"), target_format="pdf"
    )


# ========================================================================
# start_conversion
# ========================================================================


@pytest.mark.asyncio
async def test_start_conversion_uploads_encoded_file(
    api_client, fake_session, input_files
):
    a, _ = input_files
    fake_session.add("POST", BASE_URL, ok(id="conv1", minutes=1))

    session = await api_client.start_conversion(a, ".PDF")

    assert session.id == "conv1"
    assert session.source_path == str(a)
    assert session.target_format == "pdf"
    assert session.progress == 0
    assert session.state is SessionState.CREATED
    assert session.input_size == a.stat().st_size

    (_, _, kwargs), = fake_session.calls
    assert kwargs["json"] == {
        "apikey": "test-key",
        "input": "base64",
        "file": encode(a.read_bytes()),
        "filename": "a.jpg",
        "outputformat": "pdf",
    }


@pytest.mark.asyncio
async def test_start_conversion_raises_service_message(
    api_client, fake_session, input_files
):
    fake_session.add("POST", BASE_URL, error("unsupported format", code=400))

    with pytest.raises(RemoteRejection) as exc_info:
        await api_client.start_conversion(input_files[0], "xyz")

    assert exc_info.value.message == "unsupported format"
    assert exc_info.value.code == 400
    assert str(exc_info.value) == "unsupported format"


@pytest.mark.asyncio
async def test_start_conversion_missing_file_is_local_error(
    api_client, fake_session, tmp_path
):
    with pytest.raises(LocalIOError):
        await api_client.start_conversion(tmp_path / "missing.jpg", "pdf")
    assert fake_session.calls == []


@pytest.mark.asyncio
async def test_start_conversion_without_data_is_rejected(
    api_client, fake_session, input_files
):
    fake_session.add("POST", BASE_URL, FakeResponse({"code": 200, "status": "ok"}))

    with pytest.raises(RemoteRejection, match="no conversion id"):
        await api_client.start_conversion(input_files[0], "pdf")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "failure",
    [aiohttp.ClientConnectionError("connection refused"), asyncio.TimeoutError()],
)
async def test_network_failures_become_transport_errors(
    api_client, fake_session, input_files, failure
):
    fake_session.add("POST", BASE_URL, failure)

    with pytest.raises(TransportError) as exc_info:
        await api_client.start_conversion(input_files[0], "pdf")

    assert exc_info.value.__cause__ is failure


@pytest.mark.asyncio
async def test_non_json_body_is_rejected(api_client, fake_session, input_files):
    fake_session.add(
        "POST", BASE_URL, FakeResponse(ValueError("not json"), status=502)
    )

    with pytest.raises(RemoteRejection, match="HTTP 502"):
        await api_client.start_conversion(input_files[0], "pdf")


@pytest.mark.asyncio
async def test_malformed_body_is_rejected(api_client, fake_session, input_files):
    fake_session.add("POST", BASE_URL, FakeResponse({"status": "ok"}))

    with pytest.raises(RemoteRejection, match="Malformed response"):
        await api_client.start_conversion(input_files[0], "pdf")


# ========================================================================
# poll_status
# ========================================================================


@pytest.mark.asyncio
async def test_poll_status_reports_percentage(api_client, fake_session, session):
    fake_session.add("GET", STATUS_URL, ok(id="conv1", step="convert", step_percent=45))

    status = await api_client.poll_status(session)

    assert not status.finished
    assert not status.failed
    assert status.percent == 45


@pytest.mark.asyncio
@pytest.mark.parametrize("percent", [None, "", "soon"])
async def test_poll_status_treats_bad_percentage_as_zero(
    api_client, fake_session, session, percent
):
    fake_session.add(
        "GET", STATUS_URL, ok(id="conv1", step="wait", step_percent=percent)
    )

    status = await api_client.poll_status(session)

    assert status.percent == 0
    assert not status.failed


@pytest.mark.asyncio
async def test_poll_status_without_percentage_field(api_client, fake_session, session):
    fake_session.add("GET", STATUS_URL, ok(id="conv1", step="upload"))

    assert (await api_client.poll_status(session)).percent == 0


@pytest.mark.asyncio
async def test_poll_status_detects_finish(api_client, fake_session, session):
    fake_session.add("GET", STATUS_URL, ok(id="conv1", step="finish", step_percent=100))

    status = await api_client.poll_status(session)

    assert status.finished
    assert status.percent == 100


@pytest.mark.asyncio
async def test_poll_status_returns_service_failure(api_client, fake_session, session):
    fake_session.add("GET", STATUS_URL, error("conversion failed", code=422))

    status = await api_client.poll_status(session)

    assert status.failed
    assert status.error == "conversion failed"


@pytest.mark.asyncio
async def test_every_request_carries_the_api_key():
    client = ConvertioAPIClient("secret-key", base_url=BASE_URL)
    try:
        await client._initialize_session()
        assert client._session.headers["X-Api-Key"] == "secret-key"
    finally:
        await client.close()
    assert client._session.closed


# ========================================================================
# fetch_result
# ========================================================================


@pytest.mark.asyncio
async def test_fetch_result_writes_decoded_content(
    api_client, fake_session, session, tmp_path
):
    fake_session.add(
        "GET", DOWNLOAD_URL, ok(id="conv1", content=encode(b"%PDF-1.7 data"))
    )

    path, size = await api_client.fetch_result(session)

    assert path == tmp_path / "a.pdf"
    assert path.read_bytes() == b"%PDF-1.7 data"
    assert size == len(b"%PDF-1.7 data")


@pytest.mark.asyncio
async def test_fetch_result_rejects_malformed_payload(
    api_client, fake_session, session, tmp_path
):
    fake_session.add("GET", DOWNLOAD_URL, ok(id="conv1", content="%%% not base64"))

    with pytest.raises(DecodeError):
        await api_client.fetch_result(session)
    assert not (tmp_path / "a.pdf").exists()


@pytest.mark.asyncio
async def test_fetch_result_raises_service_error(api_client, fake_session, session):
    fake_session.add("GET", DOWNLOAD_URL, error("file was deleted", code=404))

    with pytest.raises(RemoteRejection, match="file was deleted"):
        await api_client.fetch_result(session)


@pytest.mark.asyncio
async def test_fetch_result_unwritable_destination(api_client, fake_session, tmp_path):
    blocked = ConversionSession(
        id="conv1",
        source_path=str(tmp_path / "missing-dir" / "a.jpg"),
        target_format="pdf",
    )
    fake_session.add("GET", DOWNLOAD_URL, ok(id="conv1", content=encode(b"x")))

    with pytest.raises(LocalIOError):
        await api_client.fetch_result(blocked)
