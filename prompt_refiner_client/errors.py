"""Error types raised by the refine-prompt client"""

from typing import Optional


class RefinerClientError(Exception):
    """Base class for every error raised by the client"""


class ValidationError(RefinerClientError):
    """Invalid input, raised before any network call"""


class SerializationError(RefinerClientError):
    """The request could not be encoded"""


class DecodeError(RefinerClientError):
    """The service answered 200 but the body is not a valid response"""


class TransportError(RefinerClientError):
    """Connection or timeout failure during a single attempt"""

    def __init__(self, message: str, attempt: int):
        super().__init__(f"{message} (attempt {attempt})")
        self.attempt = attempt


class StatusError(RefinerClientError):
    """The service answered with a non-200 status"""

    kind = 'non-200'

    def __init__(self, status_code: int, attempt: int):
        super().__init__(f"API returned {self.kind} status: {status_code} (attempt {attempt})")
        self.status_code = status_code
        self.attempt = attempt


class ClientError(StatusError):
    """HTTP 4xx. Never retried."""

    kind = 'client error'


class ServerError(StatusError):
    """HTTP 5xx"""

    kind = 'server error'


class UnexpectedStatus(StatusError):
    """Any other non-200 status (1xx, 2xx other than 200, 3xx)"""


class MaxRetriesExceeded(RefinerClientError):
    """The retry budget ran out; carries the last retryable error seen."""

    def __init__(self, last_error: Optional[RefinerClientError], attempts: int):
        super().__init__(f"max retries exceeded after {attempts} attempt(s): {last_error}")
        self.last_error = last_error
        self.attempts = attempts


class DeadlineExceeded(RefinerClientError):
    """The overall call deadline ran out before the next attempt could start."""

    def __init__(self, last_error: Optional[RefinerClientError], attempts: int):
        super().__init__(f"deadline exceeded after {attempts} attempt(s): {last_error}")
        self.last_error = last_error
        self.attempts = attempts
