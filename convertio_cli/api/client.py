"""
Async client for the Convertio conversion API.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from convertio_cli import __version__
from convertio_cli.exceptions import RemoteRejection, TransportError
from convertio_cli.media.writer import read_input_file, write_output_file
from convertio_cli.models.config import DEFAULT_BASE_URL, DEFAULT_REQUEST_TIMEOUT
from convertio_cli.models.responses import ApiResponse, DownloadResponse
from convertio_cli.models.session import (
    FINISHED_STEP,
    ConversionSession,
    ConversionStatus,
)
from convertio_cli.utils.codec import decode, encode
from convertio_cli.utils.path import normalize_format, output_path_for

log = logging.getLogger(__name__)

ResponseModel = TypeVar("ResponseModel", bound=BaseModel)


class ConvertioAPIClient:
    """
    Async client for the Convertio REST API.

    Exposes the three calls a conversion needs: start a conversion from a
    local file, poll its status, and fetch the converted result. Service
    errors are raised as RemoteRejection, network failures as TransportError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Initializes the API client.

        Args:
            api_key: The Convertio API key sent with every request.
            base_url: Base URL of the conversion endpoint.
            request_timeout: Total timeout in seconds for a single HTTP call.
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.request_timeout = request_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "ConvertioAPIClient":
        await self._initialize_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _initialize_session(self) -> None:
        """Ensures an active aiohttp session is available."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                headers={
                    "User-Agent": f"convertio-cli/{__version__}",
                    "X-Api-Key": self.api_key,
                    "Accept": "application/json",
                },
                timeout=aiohttp.ClientTimeout(total=self.request_timeout),
            )

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request_json(
        self, method: str, url: str, **kwargs: Any
    ) -> Dict[str, Any]:
        """
        Sends one request and returns its decoded JSON body.

        The service reports its own errors inside the body (with a matching
        HTTP status), so the HTTP status itself is not raised on.
        """
        await self._initialize_session()
        log.debug(f"{method} {url}")

        try:
            async with self._session.request(method, url, **kwargs) as r:
                try:
                    body = await r.json(content_type=None)
                except ValueError as e:
                    raise RemoteRejection(
                        f"Unexpected response from the conversion service "
                        f"(HTTP {r.status}).",
                        code=r.status,
                    ) from e
                status = r.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            reason = str(e) or type(e).__name__
            raise TransportError(f"Request to {url} failed: {reason}") from e

        if not isinstance(body, dict):
            raise RemoteRejection(
                f"Unexpected response from the conversion service (HTTP {status}).",
                code=status,
            )
        return body

    @staticmethod
    def _parse(model: Type[ResponseModel], body: Dict[str, Any]) -> ResponseModel:
        try:
            return model.model_validate(body)
        except ValidationError as e:
            raise RemoteRejection(
                f"Malformed response from the conversion service: {e.error_count()} "
                "invalid field(s).",
                code=body.get("code") if isinstance(body.get("code"), int) else None,
            ) from e

    async def start_conversion(
        self, source_path: str | Path, target_format: str
    ) -> ConversionSession:
        """
        Uploads a local file and starts its conversion.

        Raises:
            LocalIOError: If the input file cannot be read.
            RemoteRejection: If the service refuses the conversion.
            TransportError: If the service cannot be reached.
        """
        target_format = normalize_format(target_format)
        content = await read_input_file(source_path)
        payload = {
            "apikey": self.api_key,
            "input": "base64",
            "file": encode(content),
            "filename": Path(source_path).name,
            "outputformat": target_format,
        }

        body = await self._request_json("POST", self.base_url, json=payload)
        response = self._parse(ApiResponse, body)
        if not response.ok:
            raise RemoteRejection(response.error_message, code=response.code)
        if response.data is None:
            raise RemoteRejection(
                "Conversion service accepted the file but returned no conversion id.",
                code=response.code,
            )

        log.debug(
            f"Started conversion {response.data.id} for '{source_path}' "
            f"-> {target_format}"
        )
        return ConversionSession(
            id=response.data.id,
            source_path=str(source_path),
            target_format=target_format,
            input_size=len(content),
        )

    async def poll_status(self, session: ConversionSession) -> ConversionStatus:
        """
        Asks the service how far a conversion has come.

        A service-side failure is returned as a failed status rather than
        raised, so that only this session is affected.
        """
        body = await self._request_json(
            "GET", f"{self.base_url}/{session.id}/status"
        )
        response = self._parse(ApiResponse, body)

        if not response.ok:
            return ConversionStatus(error=response.error_message)
        if response.data is None:
            return ConversionStatus()
        if response.data.step == FINISHED_STEP:
            return ConversionStatus(finished=True, percent=100)
        return ConversionStatus(percent=response.data.step_percent)

    async def fetch_result(self, session: ConversionSession) -> Tuple[Path, int]:
        """
        Downloads the converted file, decodes it, and writes it next to the input.

        Returns:
            The output path and the number of bytes written.

        Raises:
            RemoteRejection: If the service refuses the download.
            DecodeError: If the payload is not valid base64.
            LocalIOError: If the output file cannot be written.
        """
        body = await self._request_json(
            "GET", f"{self.base_url}/{session.id}/dl/base64"
        )
        response = self._parse(DownloadResponse, body)
        if not response.ok:
            raise RemoteRejection(response.error_message, code=response.code)
        if response.data is None:
            raise RemoteRejection(
                f"Conversion {session.id} finished but no content was returned.",
                code=response.code,
            )

        data = decode(response.data.content)
        destination = output_path_for(session.source_path, session.target_format)
        size = await write_output_file(destination, data)
        return destination, size
