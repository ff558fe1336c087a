from __future__ import annotations

import errno
import socket
import logging
from dataclasses import dataclass
from typing import Optional, Union

from openai import OpenAIError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429
RATE_LIMIT_CODES = frozenset({"rate_limit_exceeded"})

CONNECTION_ERROR_NAMES = frozenset(
    {
        "APIConnectionError",
        "APITimeoutError",
        "ConnectError",
        "ConnectTimeout",
        "ReadTimeout",
        "ConnectionError",
        "TimeoutError",
    }
)
NETWORK_ERROR_CODES = frozenset(
    {"ENOTFOUND", "ECONNREFUSED", "ECONNRESET", "ETIMEDOUT", "EAI_AGAIN", "EHOSTUNREACH"}
)


class InsightError(Exception):
    """Base class for failures surfaced by the insight pipeline."""


class ConfigError(InsightError):
    """Raised before any network activity when required configuration is missing."""


class ParseError(InsightError):
    """The model answered, but no usable JSON could be read from its output."""

    def __init__(self, message: str, raw_text: str = "", parse_error: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text
        self.parse_error = parse_error


class RateLimitError(InsightError):
    def __init__(self, message: str = "OpenAI rate limit", status: int = RATE_LIMIT_STATUS):
        super().__init__(message)
        self.status = status


class NetworkError(InsightError):
    def __init__(self, message: str = "Network error", status: Optional[int] = None):
        super().__init__(message)
        self.status = status


# Anything the classifier does not recognise is re-raised untouched; for the
# OpenAI SDK that is one of its own exception types.
UnknownProviderError = OpenAIError


@dataclass(frozen=True)
class StatusFailure:
    status: Optional[int]
    code: Optional[str]


@dataclass(frozen=True)
class ConnectionFailure:
    name: str
    code: Optional[str]
    status: Optional[int]


@dataclass(frozen=True)
class OtherFailure:
    error: BaseException


ProviderFailure = Union[StatusFailure, ConnectionFailure, OtherFailure]


def _error_code(exc: BaseException) -> Optional[str]:
    # Resolver failures carry negative EAI_* numbers unknown to errno.
    if isinstance(exc, socket.gaierror):
        return "EAI_AGAIN" if exc.errno == socket.EAI_AGAIN else "ENOTFOUND"
    if isinstance(exc, OSError) and exc.errno is not None:
        return errno.errorcode.get(exc.errno)
    code = getattr(exc, "code", None)
    return code if isinstance(code, str) else None


def _error_status(exc: BaseException) -> Optional[int]:
    status = getattr(exc, "status_code", None)
    if status is None:
        status = getattr(exc, "status", None)
    return status if isinstance(status, int) else None


def describe_provider_error(exc: BaseException) -> ProviderFailure:
    """
    Reduces a raised provider exception to one of the known failure shapes.

    The OpenAI SDK wraps transport errors (httpx, OSError) as the exception
    cause, so the cause chain is searched for a low-level network code.

    Args:
        exc (BaseException): Exception raised while talking to the provider.

    Returns:
        ProviderFailure: StatusFailure, ConnectionFailure or OtherFailure.
    """
    name = type(exc).__name__
    status = _error_status(exc)
    code = _error_code(exc)

    if status == RATE_LIMIT_STATUS or code in RATE_LIMIT_CODES:
        return StatusFailure(status=status, code=code)

    if name in CONNECTION_ERROR_NAMES or code in NETWORK_ERROR_CODES:
        return ConnectionFailure(name=name, code=code, status=status)

    cause = exc.__cause__ or exc.__context__
    while cause is not None:
        cause_code = _error_code(cause)
        if cause_code in NETWORK_ERROR_CODES:
            return ConnectionFailure(name=type(cause).__name__, code=cause_code, status=status)
        cause = cause.__cause__ or cause.__context__

    if status is not None or code is not None:
        return StatusFailure(status=status, code=code)
    return OtherFailure(error=exc)


def classify_error(exc: BaseException) -> BaseException:
    """
    Maps a provider failure onto the insight error taxonomy.

    Checked in order: rate limiting, connectivity, already-classified parse
    errors, then everything else. Nothing is retried or suppressed; the caller
    raises whatever comes back.

    Args:
        exc (BaseException): The original exception.

    Returns:
        BaseException: A RateLimitError or NetworkError wrapping ``exc``, or
        ``exc`` itself.
    """
    failure = describe_provider_error(exc)

    if isinstance(failure, StatusFailure) and (
        failure.status == RATE_LIMIT_STATUS or failure.code in RATE_LIMIT_CODES
    ):
        logger.warning(f"OpenAI rate limit hit (status={failure.status}, code={failure.code})")
        return RateLimitError()

    if isinstance(failure, ConnectionFailure):
        logger.warning(f"OpenAI network failure: {failure.name} ({failure.code})")
        return NetworkError(str(exc) or "Network error", status=failure.status)

    return exc
