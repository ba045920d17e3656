"""API explorer for a group of message types.

One explorer documents the messages of one part of an application, typically
its commands or its queries. It synthesizes an ApiDescription per message
type on first access and caches the result for its lifetime.
"""

import logging
import threading
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, Field

from controllerless_docs.description.descriptors import (
    ActionDescriptor,
    ControllerDescriptor,
    ParameterDescriptor,
)
from controllerless_docs.description.models import (
    JSON_FORMATTER,
    ApiDescription,
    ApiParameterDescription,
    MediaTypeFormatter,
    ParameterSource,
    ResponseDescription,
)
from controllerless_docs.errors import ConfigurationError, require_items_not_none, require_not_none
from controllerless_docs.schema import full_type_name, public_properties, type_name

logger = logging.getLogger(__name__)

DEFAULT_API_PREFIX = "api/"
DEFAULT_PARAMETER_NAME = "message"


def default_http_method(message_type: type) -> str:
    return "POST"


def default_parameter_source(message_type: type) -> ParameterSource:
    return ParameterSource.FROM_BODY


class ExplorerSettings(BaseModel):
    """Named configuration of an explorer.

    Every selector is a pure function of the message type, except
    ``relative_path_selector`` which maps an action name to a route. Leaving
    it unset keeps the default ``api_prefix + controller_name + "/" + action``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    api_prefix: str = DEFAULT_API_PREFIX
    parameter_name: str = DEFAULT_PARAMETER_NAME
    action_name_selector: Callable[[type], str] = type_name
    http_method_selector: Callable[[type], str] = default_http_method
    parameter_source_selector: Callable[[type], ParameterSource] = default_parameter_source
    relative_path_selector: Callable[[str], str] | None = None
    supported_request_body_formatters: list[MediaTypeFormatter] = Field(
        default_factory=lambda: [JSON_FORMATTER]
    )


class ControllerlessApiExplorer:
    """Creates the API documentation for a set of messages under one part of an application."""

    def __init__(
        self,
        controller_name: str,
        message_types: Iterable[type],
        type_description_selector: Callable[[Any], str | None],
        response_type_selector: Callable[[type], Any],
    ):
        """
        Args:
            controller_name: Name of the group, typically 'commands' or 'queries'.
            message_types: The messages this explorer documents.
            type_description_selector: Returns the description of a type, or None.
            response_type_selector: Returns the response type of a message type.
        """
        require_not_none(controller_name, "controller_name")
        self.message_types = require_items_not_none(message_types, "message_types")
        self.type_description_selector = require_not_none(type_description_selector, "type_description_selector")
        self.response_type_selector = require_not_none(response_type_selector, "response_type_selector")

        self.api_prefix = DEFAULT_API_PREFIX
        self.parameter_name = DEFAULT_PARAMETER_NAME
        self.controller_descriptor = ControllerDescriptor(controller_name)
        self.action_name_selector: Callable[[type], str] = type_name
        self.http_method_selector: Callable[[type], str] = default_http_method
        self.parameter_source_selector: Callable[[type], ParameterSource] = default_parameter_source
        self.relative_path_selector: Callable[[str], str] = self.default_relative_path
        self.supported_request_body_formatters: list[MediaTypeFormatter] = [JSON_FORMATTER]

        self._descriptions: tuple[ApiDescription, ...] | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        controller_name: str,
        message_types: Iterable[type],
        type_description_selector: Callable[[Any], str | None],
        response_type_selector: Callable[[type], Any],
        settings: ExplorerSettings,
    ) -> "ControllerlessApiExplorer":
        """Create an explorer configured from an ExplorerSettings instance."""
        require_not_none(settings, "settings")
        explorer = cls(controller_name, message_types, type_description_selector, response_type_selector)
        explorer.api_prefix = settings.api_prefix
        explorer.parameter_name = settings.parameter_name
        explorer.action_name_selector = settings.action_name_selector
        explorer.http_method_selector = settings.http_method_selector
        explorer.parameter_source_selector = settings.parameter_source_selector
        if settings.relative_path_selector is not None:
            explorer.relative_path_selector = settings.relative_path_selector
        explorer.supported_request_body_formatters = list(settings.supported_request_body_formatters)
        return explorer

    @property
    def controller_name(self) -> str:
        return self.controller_descriptor.controller_name

    def default_relative_path(self, action_name: str) -> str:
        return f"{self.api_prefix}{self.controller_descriptor.controller_name}/{action_name}"

    @property
    def api_descriptions(self) -> tuple[ApiDescription, ...]:
        """The descriptions of all message types, in input order. Computed once."""
        if self._descriptions is None:
            with self._lock:
                if self._descriptions is None:
                    self._descriptions = self._get_descriptions()
        return self._descriptions

    def _get_descriptions(self) -> tuple[ApiDescription, ...]:
        descriptions = tuple(self._create_api_description(t) for t in self.message_types)
        logger.debug(
            "Synthesized %d API descriptions for '%s'", len(descriptions), self.controller_name
        )
        return descriptions

    def _create_api_description(self, message_type: type) -> ApiDescription:
        action_name = self.action_name_selector(message_type)
        response_type = self.response_type_selector(message_type)

        description = ApiDescription(
            http_method=self.http_method_selector(message_type).upper(),
            relative_path=self.relative_path_selector(action_name),
            documentation=self.type_description_selector(message_type),
        )

        parameter_source = self.parameter_source_selector(message_type)

        if description.http_method == "GET" and parameter_source == ParameterSource.FROM_BODY:
            logger.error(
                "Invalid GET/body combination for message type %s", full_type_name(message_type)
            )
            raise ConfigurationError(
                f"For the given message type {full_type_name(message_type)}, the http method "
                "selector returned GET, while the parameter source selector returned FROM_BODY. "
                "This is an invalid combination, because GET requests don't have a body."
            )

        description.action_descriptor = ActionDescriptor(
            description,
            message_type,
            action_name,
            response_type,
            self._build_parameters(message_type, parameter_source),
            controller_descriptor=self.controller_descriptor,
        )

        description._set_response_description(
            ResponseDescription(
                declared_type=response_type,
                response_type=response_type,
                documentation=self.type_description_selector(response_type),
            )
        )

        description.supported_request_body_formatters = tuple(self.supported_request_body_formatters)

        description.parameter_descriptions = tuple(
            self._to_parameter_description(parameter, parameter_source)
            for parameter in description.action_descriptor.get_parameters()
        )

        logger.debug("Described %s as %s %s", action_name, description.http_method, description.relative_path)
        return description

    def _build_parameters(
        self, message_type: type, parameter_source: ParameterSource
    ) -> list[ParameterDescriptor]:
        try:
            if parameter_source == ParameterSource.FROM_URI:
                return [
                    ParameterDescriptor(prop.name, prop.property_type)
                    for prop in public_properties(message_type)
                ]
            return [ParameterDescriptor(self.parameter_name, message_type)]
        except ConfigurationError as e:
            raise ConfigurationError(
                f"Cannot build parameters for message type {full_type_name(message_type)}: {e}"
            ) from e

    def _to_parameter_description(
        self, descriptor: ParameterDescriptor, parameter_source: ParameterSource
    ) -> ApiParameterDescription:
        return ApiParameterDescription(
            name=descriptor.parameter_name,
            source=parameter_source,
            documentation=self.type_description_selector(descriptor.parameter_type),
            parameter_descriptor=descriptor,
        )
