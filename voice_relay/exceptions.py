"""Errors raised while fetching and transcribing voice notes."""

import enum
from typing import Optional


class FailureReason(str, enum.Enum):
    """Why a voice note could not be turned into text"""
    TIMEOUT = "timeout"
    FETCH_FAILED = "fetch-failed"
    PAYLOAD_TOO_LARGE = "payload-too-large"
    NETWORK_ERROR = "network-error"
    EMPTY_RESULT = "empty-result"
    UNEXPECTED = "unexpected"


class VoiceProcessingError(Exception):
    """Base class for every failure inside the voice pipeline."""

    reason: FailureReason = FailureReason.UNEXPECTED


class FetchTimeoutError(VoiceProcessingError):
    """Raised when the media download does not finish within its time budget."""

    reason = FailureReason.TIMEOUT

    def __init__(self, url: str, timeout_seconds: float):
        self.url = url
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Media download timed out after {timeout_seconds}s")


class FetchFailedError(VoiceProcessingError):
    """Raised when the media URL answers with a non-success status or the request fails."""

    reason = FailureReason.FETCH_FAILED

    def __init__(
        self,
        url: str,
        status_code: Optional[int] = None,
        cause: Exception | None = None,
        content_type: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.cause = cause
        self.content_type = content_type
        if content_type is not None:
            message = f"Media download returned non-audio content type '{content_type}'"
        elif status_code is not None:
            message = f"Media download failed: HTTP {status_code}"
        else:
            message = f"Media download failed: {cause}"
        super().__init__(message)


class PayloadTooLargeError(VoiceProcessingError):
    """Raised when the audio exceeds the configured size ceiling."""

    reason = FailureReason.PAYLOAD_TOO_LARGE

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"Audio payload of {size} bytes exceeds limit of {max_size} bytes")


class TranscriptionNetworkError(VoiceProcessingError):
    """Raised when the call to the transcription API fails or times out."""

    reason = FailureReason.NETWORK_ERROR

    def __init__(self, filename: str, cause: Exception | None = None):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Failed to transcribe audio file '{filename}'")


class EmptyTranscriptionError(VoiceProcessingError):
    """Raised when the transcription API succeeds but returns no usable text."""

    reason = FailureReason.EMPTY_RESULT

    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(f"Transcription of '{filename}' returned no text")
