"""Combines several API explorers into one catalog."""

import logging
import threading
from typing import Protocol

from controllerless_docs.description.models import ApiDescription
from controllerless_docs.errors import require_items_not_none

logger = logging.getLogger(__name__)


class ApiExplorer(Protocol):
    """Anything that exposes an ordered collection of API descriptions."""

    @property
    def api_descriptions(self) -> tuple[ApiDescription, ...]:
        ...


class CompositeApiExplorer:
    """Wraps multiple API explorers and combines them into one collection of API descriptions.

    Descriptions keep the order of the explorers and of each explorer's own
    list. Nothing is de-duplicated; overlapping routes are the caller's concern.
    The combined collection is cached.
    """

    def __init__(self, *api_explorers: ApiExplorer):
        self.api_explorers = require_items_not_none(api_explorers, "api_explorers")
        self._descriptions: tuple[ApiDescription, ...] | None = None
        self._lock = threading.Lock()

    @property
    def api_descriptions(self) -> tuple[ApiDescription, ...]:
        if self._descriptions is None:
            with self._lock:
                if self._descriptions is None:
                    self._descriptions = tuple(
                        description
                        for explorer in self.api_explorers
                        for description in explorer.api_descriptions
                    )
                    logger.debug(
                        "Combined %d API descriptions from %d explorers",
                        len(self._descriptions),
                        len(self.api_explorers),
                    )
        return self._descriptions
