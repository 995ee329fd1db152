import asyncio
import logging
from typing import Optional, Tuple

import httpx

from voice_relay.core.settings import TwilioWhatsAppSettings, VoiceSettings
from voice_relay.exceptions import FetchFailedError, FetchTimeoutError, PayloadTooLargeError
from voice_relay.models import AudioPayload

logger = logging.getLogger(__name__)

# Content types that carry no format information; the declared type is used instead
GENERIC_CONTENT_TYPES = {"application/octet-stream", "binary/octet-stream"}


class MediaFetcher:
    """Downloads a media attachment from an authenticated URL into memory.

    Each call issues exactly one GET request, bounded by a time budget and a
    size ceiling. Nothing is written to disk and nothing is cached.
    """

    def __init__(
        self,
        timeout_seconds: float,
        max_bytes: int,
        auth: Optional[Tuple[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout_seconds = timeout_seconds
        self.max_bytes = max_bytes
        self.auth = auth
        self.transport = transport

    @classmethod
    def from_settings(
        cls,
        voice_settings: Optional[VoiceSettings] = None,
        twilio_settings: Optional[TwilioWhatsAppSettings] = None,
    ) -> "MediaFetcher":
        if voice_settings is None:
            voice_settings = VoiceSettings()
        if twilio_settings is None:
            twilio_settings = TwilioWhatsAppSettings()
        return cls(
            timeout_seconds=voice_settings.voice_fetch_timeout_ms / 1000,
            max_bytes=voice_settings.voice_max_audio_bytes,
            auth=(twilio_settings.twilio_account_sid, twilio_settings.twilio_auth_token),
        )

    async def fetch(self, url: str, fallback_content_type: Optional[str] = None) -> AudioPayload:
        """
        Download media into memory.

        Args:
            url: Media URL from the webhook payload
            fallback_content_type: Content type to use when the response doesn't declare an audio type

        Returns:
            AudioPayload: The downloaded bytes and their content type

        Raises:
            FetchTimeoutError: If the download doesn't finish within the time budget
            FetchFailedError: If the server answers with a non-success status or the request fails
            PayloadTooLargeError: If the media is larger than the size ceiling
        """
        try:
            # wait_for cancels the download when the budget runs out, which closes the connection
            return await asyncio.wait_for(
                self._download(url, fallback_content_type), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(f"Media download from {url} aborted after {self.timeout_seconds}s")
            raise FetchTimeoutError(url, self.timeout_seconds) from None

    async def _download(self, url: str, fallback_content_type: Optional[str]) -> AudioPayload:
        async with httpx.AsyncClient(
            auth=self.auth,
            follow_redirects=True,
            timeout=self.timeout_seconds,
            transport=self.transport,
        ) as client:
            try:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise FetchFailedError(url, status_code=response.status_code)

                    content_type = self._resolve_content_type(url, response, fallback_content_type)
                    self._check_declared_length(response)

                    buffer = bytearray()
                    async for chunk in response.aiter_bytes():
                        buffer.extend(chunk)
                        if len(buffer) > self.max_bytes:
                            raise PayloadTooLargeError(len(buffer), self.max_bytes)
            except httpx.TimeoutException as e:
                raise FetchTimeoutError(url, self.timeout_seconds) from e
            except httpx.HTTPError as e:
                raise FetchFailedError(url, cause=e) from e

        logger.info(f"Downloaded {len(buffer)} bytes of {content_type} media")
        return AudioPayload(data=bytes(buffer), content_type=content_type)

    def _check_declared_length(self, response: httpx.Response) -> None:
        declared_length = response.headers.get("content-length", "").strip()
        if declared_length.isdigit() and int(declared_length) > self.max_bytes:
            raise PayloadTooLargeError(int(declared_length), self.max_bytes)

    @staticmethod
    def _resolve_content_type(url: str, response: httpx.Response, fallback_content_type: Optional[str]) -> str:
        header = response.headers.get("content-type", "")
        mime_type = header.split(";", 1)[0].strip().lower()
        if mime_type.startswith("audio/"):
            return header
        # Error pages served with a 200 are rejected before any bytes go to transcription
        if mime_type and mime_type not in GENERIC_CONTENT_TYPES:
            raise FetchFailedError(url, status_code=response.status_code, content_type=header)
        return fallback_content_type or header or "application/octet-stream"
