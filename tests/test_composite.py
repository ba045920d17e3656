from types import SimpleNamespace
from unittest.mock import PropertyMock, MagicMock

import pytest

from controllerless_docs.description.composite import CompositeApiExplorer
from controllerless_docs.description.explorer import ControllerlessApiExplorer
from controllerless_docs.description.models import ApiDescription, ParameterSource
from controllerless_docs.errors import ConfigurationError


class CreateOrder:
    pass


class CancelOrder:
    pass


class GetOrder:
    order_id: int


def _source(*paths):
    return SimpleNamespace(
        api_descriptions=tuple(ApiDescription(http_method="POST", relative_path=p) for p in paths)
    )


class TestCompositeApiExplorer:
    def test_concatenates_in_source_order(self):
        a = _source("a1", "a2")
        b = _source("b1")
        composite = CompositeApiExplorer(a, b)
        assert [d.relative_path for d in composite.api_descriptions] == ["a1", "a2", "b1"]
        assert composite.api_descriptions[0] is a.api_descriptions[0]

    def test_no_de_duplication(self):
        composite = CompositeApiExplorer(_source("same"), _source("same"))
        assert len(composite.api_descriptions) == 2

    def test_no_sources(self):
        assert CompositeApiExplorer().api_descriptions == ()

    def test_none_source_is_rejected(self):
        with pytest.raises(ConfigurationError):
            CompositeApiExplorer(_source("a1"), None)

    def test_cached(self):
        source = MagicMock()
        descriptions = PropertyMock(return_value=(ApiDescription(http_method="POST", relative_path="a1"),))
        type(source).api_descriptions = descriptions
        composite = CompositeApiExplorer(source)
        first = composite.api_descriptions
        assert composite.api_descriptions is first
        descriptions.assert_called_once()

    def test_commands_and_queries(self):
        describe = lambda t: None
        commands = ControllerlessApiExplorer("commands", [CreateOrder, CancelOrder], describe, lambda t: None)
        queries = ControllerlessApiExplorer("queries", [GetOrder], describe, lambda t: int)
        queries.http_method_selector = lambda t: "GET"
        queries.parameter_source_selector = lambda t: ParameterSource.FROM_URI

        composite = CompositeApiExplorer(commands, queries)
        assert [(d.http_method, d.relative_path) for d in composite.api_descriptions] == [
            ("POST", "api/commands/CreateOrder"),
            ("POST", "api/commands/CancelOrder"),
            ("GET", "api/queries/GetOrder"),
        ]

    def test_composites_nest(self):
        inner = CompositeApiExplorer(_source("a1"), _source("b1"))
        outer = CompositeApiExplorer(inner, _source("c1"))
        assert [d.relative_path for d in outer.api_descriptions] == ["a1", "b1", "c1"]
