"""prompt-refiner-client: A client for the refine-prompt service"""

import logging

from prompt_refiner_client.client import RefinerClient
from prompt_refiner_client.config import DEFAULT_RETRY_CONFIG, Config, RetryConfig, load_config
from prompt_refiner_client.errors import (
    ClientError,
    DeadlineExceeded,
    DecodeError,
    MaxRetriesExceeded,
    RefinerClientError,
    SerializationError,
    ServerError,
    StatusError,
    TransportError,
    UnexpectedStatus,
    ValidationError,
)
from prompt_refiner_client.models import (
    Domain,
    ExpertiseLevel,
    OutputFormat,
    PromptRequest,
    PromptResponse,
)
from prompt_refiner_client.request import build_request, encode_request

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "RefinerClient",
    "Config",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "load_config",
    "Domain",
    "ExpertiseLevel",
    "OutputFormat",
    "PromptRequest",
    "PromptResponse",
    "build_request",
    "encode_request",
    "RefinerClientError",
    "ValidationError",
    "SerializationError",
    "TransportError",
    "StatusError",
    "ClientError",
    "ServerError",
    "UnexpectedStatus",
    "DecodeError",
    "MaxRetriesExceeded",
    "DeadlineExceeded",
]
