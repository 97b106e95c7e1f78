"""Build and encode refine-prompt requests"""

import json
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from .errors import SerializationError, ValidationError
from .models import Domain, ExpertiseLevel, OutputFormat, PromptRequest

E = TypeVar('E', bound=Enum)


def _coerce_enum(name: str, value: Union[E, str, None], enum_type: Type[E]) -> Optional[E]:
    if value is None:
        return None
    try:
        return enum_type(value)
    except ValueError:
        choices = ', '.join(member.value for member in enum_type)
        raise ValidationError(f"Invalid {name} '{value}'. Choose from: {choices}") from None


def _check_flag(name: str, value: Optional[bool]) -> Optional[bool]:
    if value is not None and not isinstance(value, bool):
        raise ValidationError(f"{name} must be a boolean or None, got {type(value).__name__}")
    return value


def build_request(
    lazy_prompt: str,
    domain: Union[Domain, str, None] = None,
    expertise_level: Union[ExpertiseLevel, str, None] = None,
    output_format: Union[OutputFormat, str, None] = None,
    include_best_practices: Optional[bool] = None,
    include_examples: Optional[bool] = None,
) -> PromptRequest:
    """Assemble a PromptRequest from a prompt and optional parameters.

    Enum parameters take either the enum member or its string value. Any
    parameter left as None stays unset and is omitted on the wire.

    Args:
        lazy_prompt: The prompt to refine, must be non-empty
        domain: Subject area of the prompt
        expertise_level: Target audience level
        output_format: Shape of the refined prompt
        include_best_practices: Ask for best practices in the output
        include_examples: Ask for examples in the output

    Returns:
        The request, ready for encode_request

    Raises:
        ValidationError: If the prompt is empty or a parameter is invalid
    """
    if not isinstance(lazy_prompt, str):
        raise ValidationError(f"lazy prompt must be a string, got {type(lazy_prompt).__name__}")
    if lazy_prompt == '':
        raise ValidationError("lazy prompt cannot be empty")

    return PromptRequest(
        lazy_prompt=lazy_prompt,
        domain=_coerce_enum('domain', domain, Domain),
        expertise_level=_coerce_enum('expertise level', expertise_level, ExpertiseLevel),
        output_format=_coerce_enum('output format', output_format, OutputFormat),
        include_best_practices=_check_flag('include_best_practices', include_best_practices),
        include_examples=_check_flag('include_examples', include_examples),
    )


def encode_request(request: PromptRequest) -> bytes:
    """Serialize a request to a UTF-8 JSON body"""
    try:
        return json.dumps(request.to_payload()).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise SerializationError(f"error marshaling request: {e}") from e
