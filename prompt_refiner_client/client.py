"""Retrying HTTP client for the refine-prompt endpoint"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Union

import httpx

from .config import DEFAULT_RETRY_CONFIG, Config, RetryConfig
from .errors import (
    ClientError,
    DeadlineExceeded,
    DecodeError,
    MaxRetriesExceeded,
    RefinerClientError,
    ServerError,
    TransportError,
    UnexpectedStatus,
    ValidationError,
)
from .models import Domain, ExpertiseLevel, OutputFormat, PromptResponse
from .request import build_request, encode_request

logger = logging.getLogger(__name__)

REFINE_PATH = '/refine-prompt'

_HEADERS = {
    'Content-Type': 'application/json',
    'Accept': 'application/json',
}


class Outcome(Enum):
    SUCCEEDED = 'succeeded'
    RETRY = 'retry'
    FAILED = 'failed'
    # deadline ran out while the attempt was in flight
    EXPIRED = 'expired'


@dataclass(frozen=True)
class AttemptResult:
    """Classified outcome of one attempt"""

    outcome: Outcome
    response: Optional[PromptResponse] = None
    error: Optional[RefinerClientError] = None


def classify_response(response: httpx.Response, attempt: int = 1) -> AttemptResult:
    """Classify an HTTP response as success, retryable or terminal.

    Args:
        response: The response received for this attempt
        attempt: One-based attempt number, used in error messages

    Returns:
        AttemptResult carrying either the decoded response or the error
    """
    status = response.status_code

    if status == 200:
        try:
            data = response.json()
        except (ValueError, RecursionError) as e:
            error = DecodeError(f"error decoding response: {e}")
            error.__cause__ = e
            return AttemptResult(Outcome.FAILED, error=error)
        try:
            return AttemptResult(Outcome.SUCCEEDED, response=PromptResponse.from_dict(data))
        except DecodeError as e:
            return AttemptResult(Outcome.FAILED, error=e)

    if 400 <= status < 500:
        return AttemptResult(Outcome.FAILED, error=ClientError(status, attempt))
    if status >= 500:
        return AttemptResult(Outcome.RETRY, error=ServerError(status, attempt))
    return AttemptResult(Outcome.RETRY, error=UnexpectedStatus(status, attempt))


def classify_transport_error(exc: httpx.RequestError, attempt: int = 1) -> AttemptResult:
    """Connection, timeout and protocol failures are always retryable"""
    error = TransportError(f"error making request: {exc}", attempt)
    error.__cause__ = exc
    return AttemptResult(Outcome.RETRY, error=error)


def _check_base_url(base_url: str) -> None:
    if not isinstance(base_url, str):
        raise ValidationError(f"base URL must be a string, got {type(base_url).__name__}")
    try:
        url = httpx.URL(base_url)
    except httpx.InvalidURL as e:
        raise ValidationError(f"Invalid base URL '{base_url}': {e}") from e
    if url.scheme not in ('http', 'https') or not url.host:
        raise ValidationError(f"Invalid base URL '{base_url}'. Expected an absolute http or https URL")


class RefinerClient:
    """Client for the refine-prompt service.

    The client keeps no per-call state, so one instance can serve several
    threads at once. ``with_retry_config`` must not race with in-flight calls.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30,
        retry_config: Optional[RetryConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the client.

        Args:
            base_url: Service root, e.g. ``http://localhost:8080``
            timeout: Per-attempt timeout in seconds
            retry_config: Backoff policy, defaults to DEFAULT_RETRY_CONFIG
            transport: Optional httpx transport, mainly for tests
            sleep: Blocking sleep used between attempts
            clock: Monotonic clock used for deadlines

        Raises:
            ValidationError: If the base URL is not an absolute http(s) URL
                or the timeout is not a positive number
        """
        _check_base_url(base_url)
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or not timeout > 0:
            raise ValidationError(f"timeout must be a positive number of seconds, got {timeout!r}")

        self._base_url = base_url.rstrip('/')
        self._timeout = timeout
        self._http = httpx.Client(timeout=timeout, transport=transport)
        self._sleep = sleep
        self._clock = clock
        self.retry_config = retry_config or DEFAULT_RETRY_CONFIG

    @classmethod
    def from_config(cls, config: Config, **kwargs: Any) -> 'RefinerClient':
        """Create a client from a loaded Config"""
        return cls(
            config.client.base_url,
            timeout=config.client.timeout_seconds,
            retry_config=config.retry,
            **kwargs,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def url(self) -> str:
        return self._base_url + REFINE_PATH

    def with_retry_config(self, retry_config: RetryConfig) -> 'RefinerClient':
        """Replace the retry configuration and return this client"""
        self.retry_config = retry_config
        return self

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> 'RefinerClient':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def refine_with_options(
        self,
        lazy_prompt: str,
        domain: Union[Domain, str, None] = None,
        expertise_level: Union[ExpertiseLevel, str, None] = None,
        output_format: Union[OutputFormat, str, None] = None,
        include_best_practices: Optional[bool] = None,
        include_examples: Optional[bool] = None,
        deadline: Optional[float] = None,
    ) -> PromptResponse:
        """Refine a prompt with every option the API supports.

        Args:
            lazy_prompt: The prompt to refine, must be non-empty
            domain: Subject area of the prompt
            expertise_level: Target audience level
            output_format: Shape of the refined prompt
            include_best_practices: Ask for best practices in the output
            include_examples: Ask for examples in the output
            deadline: Optional budget in seconds for the whole call,
                retries and backoff included

        Returns:
            The decoded PromptResponse

        Raises:
            ValidationError: Bad input, raised before any request is made
            SerializationError: The request could not be encoded
            ClientError: The service answered 4xx
            DecodeError: The service answered 200 with an unusable body
            MaxRetriesExceeded: Every attempt failed with a retryable error
            DeadlineExceeded: The deadline ran out between attempts
        """
        if deadline is not None and deadline <= 0:
            raise ValidationError("deadline must be positive")

        request = build_request(
            lazy_prompt,
            domain=domain,
            expertise_level=expertise_level,
            output_format=output_format,
            include_best_practices=include_best_practices,
            include_examples=include_examples,
        )
        return self._execute(encode_request(request), deadline)

    def refine(self, lazy_prompt: str, deadline: Optional[float] = None) -> str:
        """Refine a prompt with default options and return only the refined text"""
        response = self.refine_with_options(lazy_prompt, deadline=deadline)
        return response.refined_prompt

    def _execute(self, body: bytes, deadline: Optional[float]) -> PromptResponse:
        retry_config = self.retry_config
        expires_at = None if deadline is None else self._clock() + deadline
        last_error: Optional[RefinerClientError] = None

        for attempt in range(retry_config.max_retries + 1):
            delay = retry_config.delay_for(attempt)
            timeout = self._timeout

            if expires_at is not None:
                remaining = expires_at - self._clock() - delay
                if remaining <= 0:
                    logger.error("Deadline exceeded after %d attempt(s): %s", attempt, last_error)
                    raise DeadlineExceeded(last_error, attempt) from last_error
                timeout = min(timeout, remaining)

            if attempt > 0:
                logger.warning("Retrying in %.3fs after: %s", delay, last_error)
                self._sleep(delay)

            result = self._attempt(body, attempt + 1, timeout, expires_at)
            if result.outcome is Outcome.SUCCEEDED:
                return result.response
            if result.outcome is Outcome.FAILED:
                raise result.error
            if result.outcome is Outcome.EXPIRED:
                logger.error("Deadline exceeded during attempt %d: %s", attempt + 1, last_error)
                raise DeadlineExceeded(last_error, attempt + 1) from last_error
            last_error = result.error

        attempts = retry_config.max_retries + 1
        logger.error("Max retries exceeded after %d attempt(s): %s", attempts, last_error)
        raise MaxRetriesExceeded(last_error, attempts) from last_error

    def _attempt(
        self,
        body: bytes,
        attempt: int,
        timeout: float,
        expires_at: Optional[float] = None,
    ) -> AttemptResult:
        logger.debug("POST %s (attempt %d)", self.url, attempt)
        try:
            with self._http.stream(
                'POST', self.url, content=body, headers=_HEADERS, timeout=timeout
            ) as response:
                # httpx applies the timeout per read, so the deadline is checked per chunk
                chunks = []
                for chunk in response.iter_raw():
                    chunks.append(chunk)
                    if expires_at is not None and self._clock() >= expires_at:
                        return AttemptResult(Outcome.EXPIRED)
        except httpx.RequestError as e:
            return classify_transport_error(e, attempt)

        try:
            received = httpx.Response(
                response.status_code,
                headers=response.headers,
                content=b''.join(chunks),
            )
        except httpx.DecodingError as e:
            if response.status_code != 200:
                return classify_response(httpx.Response(response.status_code), attempt)
            error = DecodeError(f"error decoding response: {e}")
            error.__cause__ = e
            return AttemptResult(Outcome.FAILED, error=error)
        return classify_response(received, attempt)
