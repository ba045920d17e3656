"""Record shapes for synthesized API descriptions.

Explorers fill these in for every message type and hand them to the
documentation renderer, which only ever reads them.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr

from controllerless_docs.description.descriptors import ActionDescriptor, ParameterDescriptor
from controllerless_docs.schema import full_type_name


class ParameterSource(str, Enum):
    """Where the value of a parameter is read from."""

    FROM_BODY = "body"
    FROM_URI = "uri"  # query string or route values
    UNKNOWN = "unknown"


class MediaTypeFormatter(BaseModel):
    """A formatter able to read request bodies of the given media types."""

    model_config = ConfigDict(frozen=True)

    name: str
    media_types: tuple[str, ...]


JSON_FORMATTER = MediaTypeFormatter(name="json", media_types=("application/json", "text/json"))


class ApiParameterDescription(BaseModel):
    """Description of a single parameter of an API."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    source: ParameterSource
    documentation: str | None = None
    parameter_descriptor: ParameterDescriptor | None = None

    @property
    def parameter_type(self) -> Any:
        if self.parameter_descriptor is None:
            return None
        return self.parameter_descriptor.parameter_type


class ResponseDescription(BaseModel):
    """Description of what an API returns."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    declared_type: Any = None
    response_type: Any = None
    documentation: str | None = None


class ApiDescription(BaseModel):
    """A single API: route, verb, documentation, parameters and response.

    Explorers build a description in steps and publish it once complete.
    Parameters and formatters are tuples so published descriptions cannot grow.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    http_method: str
    relative_path: str
    documentation: str | None = None
    action_descriptor: ActionDescriptor | None = None
    parameter_descriptions: tuple[ApiParameterDescription, ...] = ()
    supported_request_body_formatters: tuple[MediaTypeFormatter, ...] = ()

    _response_description: ResponseDescription | None = PrivateAttr(default=None)

    @property
    def response_description(self) -> ResponseDescription | None:
        return self._response_description

    def _set_response_description(self, response: ResponseDescription) -> None:
        # The response is not part of the public constructor; explorers set it here.
        self._response_description = response

    @property
    def id(self) -> str:
        return f"{self.http_method}{self.relative_path}"

    @property
    def action_name(self) -> str | None:
        if self.action_descriptor is None:
            return None
        return self.action_descriptor.action_name

    def to_summary(self) -> dict:
        """Plain-data view of the description, safe to dump as JSON or YAML."""
        response = self.response_description
        return {
            "id": self.id,
            "http_method": self.http_method,
            "relative_path": self.relative_path,
            "action_name": self.action_name,
            "documentation": self.documentation,
            "parameters": [
                {
                    "name": p.name,
                    "source": p.source.value,
                    "type": full_type_name(p.parameter_type),
                    "documentation": p.documentation,
                }
                for p in self.parameter_descriptions
            ],
            "response": None if response is None else {
                "declared_type": full_type_name(response.declared_type),
                "response_type": full_type_name(response.response_type),
                "documentation": response.documentation,
            },
            "request_body_media_types": [
                media_type
                for formatter in self.supported_request_body_formatters
                for media_type in formatter.media_types
            ],
        }
