"""Exceptions raised while building API descriptions."""


class ControllerlessError(Exception):
    """Base class for all controllerless-docs errors."""


class ConfigurationError(ControllerlessError, ValueError):
    """An explorer, provider or catalog was configured incorrectly."""


class UnreachableActionError(ControllerlessError, NotImplementedError):
    """A documentation-only action descriptor was asked to execute."""


def require_not_none(value, name: str):
    """Return ``value`` or raise ConfigurationError when it is None."""
    if value is None:
        raise ConfigurationError(f"{name} must not be None")
    return value


def require_items_not_none(values, name: str) -> tuple:
    """Return ``values`` as a tuple, rejecting None for the sequence or any item."""
    require_not_none(values, name)
    values = tuple(values)
    for index, value in enumerate(values):
        require_not_none(value, f"{name}[{index}]")
    return values
