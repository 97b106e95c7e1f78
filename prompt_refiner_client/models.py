"""Request and response types for the refine-prompt endpoint"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import DecodeError


class Domain(str, Enum):
    ARCHITECTURE = 'architecture'
    DEVELOPMENT = 'development'
    INFRASTRUCTURE = 'infrastructure'
    SECURITY = 'security'
    GENERAL = 'general'


class ExpertiseLevel(str, Enum):
    BEGINNER = 'beginner'
    INTERMEDIATE = 'intermediate'
    EXPERT = 'expert'


class OutputFormat(str, Enum):
    SIMPLE = 'simple'
    DETAILED = 'detailed'
    TUTORIAL = 'tutorial'
    CHECKLIST = 'checklist'


@dataclass(frozen=True)
class PromptRequest:
    """A refine-prompt request.

    Every optional field uses ``None`` for "not set". Unset fields are left
    out of the wire payload entirely, so ``include_examples=False`` and an
    unset ``include_examples`` reach the service differently.
    """

    lazy_prompt: str
    domain: Optional[Domain] = None
    expertise_level: Optional[ExpertiseLevel] = None
    output_format: Optional[OutputFormat] = None
    include_best_practices: Optional[bool] = None
    include_examples: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        """Return the JSON-ready body with unset fields omitted"""
        payload: Dict[str, Any] = {'lazy_prompt': self.lazy_prompt}
        if self.domain is not None:
            payload['domain'] = self.domain.value
        if self.expertise_level is not None:
            payload['expertise_level'] = self.expertise_level.value
        if self.output_format is not None:
            payload['output_format'] = self.output_format.value
        if self.include_best_practices is not None:
            payload['include_best_practices'] = self.include_best_practices
        if self.include_examples is not None:
            payload['include_examples'] = self.include_examples
        return payload


def _string_tuple(data: Dict[str, Any], key: str) -> Optional[Tuple[str, ...]]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DecodeError(f"'{key}' must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class PromptResponse:
    refined_prompt: str
    detected_topics: Tuple[str, ...] = ()
    recommended_references: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_dict(cls, data: Any) -> 'PromptResponse':
        """Create PromptResponse from a decoded JSON body.

        Args:
            data: The decoded body

        Returns:
            The validated response

        Raises:
            DecodeError: If the body does not match the response contract
        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected a JSON object, got {type(data).__name__}")

        refined_prompt = data.get('refined_prompt')
        if not isinstance(refined_prompt, str):
            raise DecodeError("'refined_prompt' is missing or not a string")

        return cls(
            refined_prompt=refined_prompt,
            detected_topics=_string_tuple(data, 'detected_topics') or (),
            recommended_references=_string_tuple(data, 'recommended_references'),
        )
