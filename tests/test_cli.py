import json
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from controllerless_docs.cli import main

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def shop_path(monkeypatch):
    monkeypatch.syspath_prepend(str(FIXTURES))


class TestCliDescribe:
    def test_describe_yaml_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["describe", str(FIXTURES / "catalog.yaml"), "--app-dir", str(FIXTURES)])

        assert result.exit_code == 0, result.output
        summaries = yaml.safe_load(result.output)
        assert [s["relative_path"] for s in summaries] == [
            "api/commands/CreateOrder",
            "api/commands/CancelOrder",
            "api/queries/GetOrderById",
        ]
        assert summaries[0]["parameters"][0]["name"] == "message"
        assert summaries[0]["parameters"][0]["type"] == "shop_messages.CreateOrder"

    def test_describe_json_to_file(self, tmp_path):
        output_file = tmp_path / "out" / "descriptions.json"
        runner = CliRunner()
        result = runner.invoke(main, [
            "describe", str(FIXTURES / "catalog.yaml"),
            "--app-dir", str(FIXTURES),
            "--format", "json",
            "-o", str(output_file),
        ])

        assert result.exit_code == 0, result.output
        assert "3 API descriptions saved" in result.output
        summaries = json.loads(output_file.read_text(encoding="utf-8"))
        get = summaries[2]
        assert get["http_method"] == "GET"
        assert get["parameters"] == [
            {"name": "order_id", "source": "uri", "type": "int", "documentation": None}
        ]
        assert get["response"]["response_type"] == "shop_messages.OrderResult"

    def test_configuration_error_exits_with_message(self):
        runner = CliRunner()
        result = runner.invoke(main, ["describe", str(FIXTURES / "invalid_get_body.yaml"), "--app-dir", str(FIXTURES)])

        assert result.exit_code == 1
        assert "GetOrderById" in result.output

    def test_malformed_catalog_exits_with_message(self, tmp_path):
        catalog = tmp_path / "catalog.yaml"
        catalog.write_text("1: x\ngroups: []\n")
        runner = CliRunner()
        result = runner.invoke(main, ["describe", str(catalog), "--app-dir", str(FIXTURES)])

        assert result.exit_code == 1
        assert "non-string keys" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_missing_catalog_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["describe", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2


class TestCliRoutes:
    def test_routes(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes", str(FIXTURES / "catalog.yaml"), "--app-dir", str(FIXTURES)])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines == [
            "POST    api/commands/CreateOrder",
            "POST    api/commands/CancelOrder",
            "GET     api/queries/GetOrderById",
        ]

    def test_verbose_flag(self):
        runner = CliRunner()
        result = runner.invoke(main, ["-v", "routes", str(FIXTURES / "catalog.yaml"), "--app-dir", str(FIXTURES)])
        assert result.exit_code == 0, result.output
        assert "api/queries/GetOrderById" in result.output
