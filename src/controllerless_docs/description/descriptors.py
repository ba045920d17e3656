"""Action and parameter descriptors for message types.

An action descriptor stands in for the controller action a message type
would otherwise need. It carries metadata only and is never dispatched.
"""

from typing import TYPE_CHECKING, Any, Iterable

from controllerless_docs.errors import ConfigurationError, UnreachableActionError
from controllerless_docs.schema import get_custom_attributes

if TYPE_CHECKING:
    from controllerless_docs.description.models import ApiDescription


def to_camel_case(name: str) -> str:
    """Lower-case the first character of ``name``, leaving the rest unchanged."""
    if not name:
        raise ConfigurationError("parameter name must not be empty")
    return name[0].lower() + name[1:]


class ControllerDescriptor:
    """Groups the actions of one explorer, e.g. 'commands' or 'queries'."""

    def __init__(self, controller_name: str):
        self.controller_name = controller_name

    def get_custom_attributes(self, attribute_type: type | None = None) -> tuple:
        return ()

    def __repr__(self) -> str:
        return f"ControllerDescriptor({self.controller_name!r})"


class ParameterDescriptor:
    """A formal parameter of a synthesized action."""

    def __init__(self, parameter_name: str, parameter_type: Any):
        self._parameter_name = to_camel_case(parameter_name)
        self._parameter_type = parameter_type
        self._action_descriptor: "ActionDescriptor | None" = None

    @property
    def parameter_name(self) -> str:
        return self._parameter_name

    @property
    def parameter_type(self) -> Any:
        return self._parameter_type

    @property
    def action_descriptor(self) -> "ActionDescriptor | None":
        return self._action_descriptor

    def _attach(self, action: "ActionDescriptor") -> None:
        if self._action_descriptor is not None and self._action_descriptor is not action:
            raise ConfigurationError(
                f"parameter '{self._parameter_name}' already belongs to action "
                f"'{self._action_descriptor.action_name}'"
            )
        self._action_descriptor = action

    def __repr__(self) -> str:
        return f"ParameterDescriptor({self._parameter_name!r}, {self._parameter_type!r})"


class ActionDescriptor:
    """The synthesized action of one message type."""

    def __init__(
        self,
        api_description: "ApiDescription",
        message_type: type,
        action_name: str,
        return_type: Any,
        parameters: Iterable[ParameterDescriptor],
        controller_descriptor: ControllerDescriptor | None = None,
    ):
        self._api_description = api_description
        self._message_type = message_type
        self._action_name = action_name
        self._return_type = return_type
        self._controller_descriptor = controller_descriptor
        self._parameters = tuple(parameters)
        for parameter in self._parameters:
            parameter._attach(self)

    @property
    def api_description(self) -> "ApiDescription":
        return self._api_description

    @property
    def message_type(self) -> type:
        """The message class this action documents."""
        return self._message_type

    @property
    def action_name(self) -> str:
        return self._action_name

    @property
    def return_type(self) -> Any:
        return self._return_type

    @property
    def controller_descriptor(self) -> ControllerDescriptor | None:
        return self._controller_descriptor

    def get_parameters(self) -> tuple[ParameterDescriptor, ...]:
        return self._parameters

    def get_custom_attributes(self, attribute_type: type | None = None, inherit: bool = True) -> tuple:
        """Attributes of this action, i.e. those declared on the message class."""
        return get_custom_attributes(self._message_type, attribute_type, inherit=inherit)

    def execute(self, *args, **kwargs):
        """Never dispatched: these actions exist for documentation only."""
        raise UnreachableActionError(
            f"action '{self._action_name}' for {self._message_type.__qualname__} "
            "is documentation only and cannot be executed"
        )

    def __repr__(self) -> str:
        return f"ActionDescriptor({self._action_name!r}, {self._message_type.__qualname__})"
