"""Catalog configuration files.

A catalog file lists groups of message classes and how to document them::

    api_prefix: api/
    groups:
      - name: commands
        messages: ["shop.commands:CreateOrder", "shop.commands:CancelOrder"]
      - name: queries
        messages: ["shop.queries:GetOrderById"]
        http_method: GET
        parameter_source: uri
        response_type: "shop.results:OrderResult"
"""

import importlib
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from controllerless_docs.description.composite import CompositeApiExplorer
from controllerless_docs.description.explorer import (
    DEFAULT_API_PREFIX,
    DEFAULT_PARAMETER_NAME,
    ControllerlessApiExplorer,
    ExplorerSettings,
)
from controllerless_docs.description.models import ParameterSource
from controllerless_docs.description.providers import (
    CompositeDescriptionProvider,
    DefaultDescriptionProvider,
    DocstringDescriptionProvider,
)
from controllerless_docs.errors import ConfigurationError

HTTP_METHODS = ("GET", "POST", "PUT", "DELETE", "PATCH")

RESPONSE_TYPE_ATTRIBUTE = "__response_type__"


class GroupConfig(BaseModel):
    """One explorer: a named group of message classes."""

    name: str
    messages: list[str]
    http_method: str = "POST"
    parameter_source: ParameterSource = ParameterSource.FROM_BODY
    response_type: str | None = None

    @field_validator("http_method")
    @classmethod
    def _known_method(cls, value: str) -> str:
        value = value.upper()
        if value not in HTTP_METHODS:
            raise ValueError(f"unsupported http method '{value}', expected one of {', '.join(HTTP_METHODS)}")
        return value


class CatalogConfig(BaseModel):
    """All groups of a catalog plus the settings they share."""

    api_prefix: str = DEFAULT_API_PREFIX
    parameter_name: str = DEFAULT_PARAMETER_NAME
    default_description: str | None = None
    groups: list[GroupConfig]


def load_catalog_config(file_path: Path) -> CatalogConfig:
    """Read and validate a YAML catalog file."""
    text = file_path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{file_path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"{file_path} must contain a mapping with a 'groups' list")

    bad_keys = [key for key in data if not isinstance(key, str)]
    if bad_keys:
        raise ConfigurationError(f"{file_path} has non-string keys: {bad_keys!r}")

    try:
        return CatalogConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid catalog {file_path}:\n{e}") from e


def import_object(reference: str):
    """Resolve a ``module:attribute`` reference, e.g. ``shop.commands:CreateOrder``."""
    module_name, sep, attribute_path = reference.partition(":")
    if not sep or not module_name or not attribute_path or module_name.startswith("."):
        raise ConfigurationError(f"'{reference}' is not a 'module:attribute' reference")

    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import module '{module_name}': {e}") from e

    for part in attribute_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigurationError(f"'{reference}' does not exist") from e
    return obj


def build_catalog(config: CatalogConfig) -> CompositeApiExplorer:
    """Build one explorer per group and combine them, in file order."""
    providers = [DocstringDescriptionProvider()]
    if config.default_description is not None:
        providers.append(DefaultDescriptionProvider(config.default_description))
    describe = CompositeDescriptionProvider(*providers).get_description

    explorers = [_build_explorer(group, config, describe) for group in config.groups]
    return CompositeApiExplorer(*explorers)


def _build_explorer(group: GroupConfig, config: CatalogConfig, describe) -> ControllerlessApiExplorer:
    message_types = [_import_message_type(reference) for reference in group.messages]
    default_response = import_object(group.response_type) if group.response_type else type(None)

    def response_type(message_type: type):
        return getattr(message_type, RESPONSE_TYPE_ATTRIBUTE, default_response)

    settings = ExplorerSettings(
        api_prefix=config.api_prefix,
        parameter_name=config.parameter_name,
        http_method_selector=lambda message_type: group.http_method,
        parameter_source_selector=lambda message_type: group.parameter_source,
    )
    return ControllerlessApiExplorer.from_settings(group.name, message_types, describe, response_type, settings)


def _import_message_type(reference: str) -> type:
    obj = import_object(reference)
    if not isinstance(obj, type):
        raise ConfigurationError(f"'{reference}' is not a class")
    return obj
