"""Declared schema of message classes.

Message classes describe their public properties statically: pydantic
models through ``model_fields``, dataclasses through their fields, and any
other class through its type annotations. Custom attributes are attached
explicitly with the ``api_attributes`` decorator.
"""

import dataclasses
import inspect
import typing
from typing import Any, ClassVar, NamedTuple

from pydantic import BaseModel

ATTRIBUTES_KEY = "__api_attributes__"


class MessageProperty(NamedTuple):
    """A public property of a message class."""

    name: str
    property_type: Any


def type_name(tp: Any) -> str:
    """Short name of a type, e.g. ``CreateOrder``."""
    if typing.get_origin(tp) is not None:
        return repr(tp).replace("typing.", "")
    return getattr(tp, "__name__", None) or repr(tp)


def full_type_name(tp: Any) -> str:
    """Module-qualified name of a type, e.g. ``app.commands.CreateOrder``."""
    if tp is None:
        return "None"
    if typing.get_origin(tp) is not None or not isinstance(tp, type):
        # typing constructs such as list[int] or Optional[str]
        return repr(tp).replace("typing.", "")
    module = tp.__module__
    if module == "builtins":
        return tp.__qualname__
    return f"{module}.{tp.__qualname__}"


def public_properties(message_type: type) -> list[MessageProperty]:
    """List the public instance properties of a message class, in declaration order."""
    if isinstance(message_type, type) and issubclass(message_type, BaseModel):
        items = [(name, field.annotation) for name, field in message_type.model_fields.items()]
    elif dataclasses.is_dataclass(message_type):
        hints = _type_hints(message_type)
        items = [(f.name, hints.get(f.name, f.type)) for f in dataclasses.fields(message_type)]
    else:
        items = [
            (name, tp)
            for name, tp in _type_hints(message_type).items()
            if not _is_class_var(tp)
        ]

    return [MessageProperty(name, tp) for name, tp in items if not name.startswith("_")]


def api_attributes(*attributes: Any):
    """Class decorator attaching custom attributes to a message class."""

    def decorate(cls: type) -> type:
        existing = cls.__dict__.get(ATTRIBUTES_KEY, ())
        setattr(cls, ATTRIBUTES_KEY, tuple(existing) + attributes)
        return cls

    return decorate


def get_custom_attributes(message_type: type, attribute_type: type | None = None,
                          inherit: bool = True) -> tuple:
    """Return the custom attributes declared on a message class.

    With ``inherit`` the base classes are searched too, most-derived first.
    When ``attribute_type`` is given only instances of it are returned.
    """
    classes = message_type.__mro__ if inherit else (message_type,)
    found = []
    for cls in classes:
        for attribute in cls.__dict__.get(ATTRIBUTES_KEY, ()):
            if attribute_type is None or isinstance(attribute, attribute_type):
                found.append(attribute)
    return tuple(found)


def _is_class_var(tp: Any) -> bool:
    if isinstance(tp, str):
        # raw annotation left unresolved by the fallback below
        return tp.replace("typing.", "", 1).startswith("ClassVar")
    return tp is ClassVar or typing.get_origin(tp) is ClassVar


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except NameError:
        # Unresolvable forward references: fall back to the raw annotations
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(inspect.get_annotations(klass))
        return hints
