"""Description and documentation providers.

The composite providers try their delegates in order and return the first
answer. The single-source providers are the usual delegates: a message's own
docstring, a hand-written mapping and a constant fallback.
"""

import inspect
from typing import Any, Mapping, Protocol

from controllerless_docs.description.descriptors import (
    ActionDescriptor,
    ControllerDescriptor,
    ParameterDescriptor,
)
from controllerless_docs.errors import require_items_not_none, require_not_none


class DescriptionProvider(Protocol):
    """Returns a description for a type, or None."""

    def get_description(self, type_: Any) -> str | None:
        ...


class TypeDescriptionProvider(Protocol):
    """Returns the description of a type, or None when there is none."""

    def get_description(self, type_: Any) -> str | None:
        ...


class DocumentationProvider(Protocol):
    """Documents parameters, actions, controllers and action responses."""

    def get_documentation(
        self, descriptor: ParameterDescriptor | ActionDescriptor | ControllerDescriptor
    ) -> str | None:
        ...

    def get_response_documentation(self, action: ActionDescriptor) -> str | None:
        ...


class CompositeDescriptionProvider:
    """Returns the first non-empty description of its providers."""

    def __init__(self, *providers: DescriptionProvider):
        self.providers = require_items_not_none(providers, "providers")

    def get_description(self, type_: Any) -> str | None:
        return _first_non_empty(p.get_description(type_) for p in self.providers)


class CompositeTypeDescriptionProvider:
    """Wraps a set of type description providers and returns the first found description of a type."""

    def __init__(self, *providers: TypeDescriptionProvider):
        self.providers = require_items_not_none(providers, "providers")

    def get_description(self, type_: Any) -> str | None:
        """Get the type's description, or None when no provider describes it."""
        return _first_non_empty(p.get_description(type_) for p in self.providers)


class CompositeDocumentationProvider:
    """Returns the first documentation that is not None.

    Unlike the description providers an empty string counts as an answer.
    """

    def __init__(self, *providers: DocumentationProvider):
        self.providers = require_items_not_none(providers, "providers")

    def get_documentation(self, descriptor):
        return _first_not_none(p.get_documentation(descriptor) for p in self.providers)

    def get_response_documentation(self, action: ActionDescriptor) -> str | None:
        return _first_not_none(p.get_response_documentation(action) for p in self.providers)


class DocstringDescriptionProvider:
    """Describes a class by its own docstring.

    Docstrings inherited from base classes, the signature line dataclasses
    generate and builtin types are ignored.
    """

    def get_description(self, type_: Any) -> str | None:
        if not isinstance(type_, type) or type_.__module__ == "builtins":
            return None
        doc = type_.__dict__.get("__doc__")
        if not doc or not isinstance(doc, str):
            return None
        if doc.startswith(f"{type_.__name__}("):
            # dataclasses without a docstring get their signature as __doc__
            return None
        return inspect.cleandoc(doc)


class MappingDescriptionProvider:
    """Describes types from a fixed ``{type: description}`` mapping."""

    def __init__(self, descriptions: Mapping[Any, str]):
        self.descriptions = dict(require_not_none(descriptions, "descriptions"))

    def get_description(self, type_: Any) -> str | None:
        return self.descriptions.get(type_)


class DefaultDescriptionProvider:
    """Gives every type the same description; useful as the last fallback."""

    def __init__(self, description: str):
        self.description = description

    def get_description(self, type_: Any) -> str | None:
        return self.description


class TypeDocumentationProvider:
    """Documents descriptors through the description of the type behind them."""

    def __init__(self, type_provider: TypeDescriptionProvider):
        self.type_provider = require_not_none(type_provider, "type_provider")

    def get_documentation(self, descriptor):
        if isinstance(descriptor, ParameterDescriptor):
            return self.type_provider.get_description(descriptor.parameter_type)
        if isinstance(descriptor, ActionDescriptor):
            return self.type_provider.get_description(descriptor.message_type)
        return None

    def get_response_documentation(self, action: ActionDescriptor) -> str | None:
        return self.type_provider.get_description(action.return_type)


def _first_non_empty(values):
    for value in values:
        if value:
            return value
    return None


def _first_not_none(values):
    for value in values:
        if value is not None:
            return value
    return None
