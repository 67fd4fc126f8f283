from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from kong_codegen.cli import _parse_mappings, main

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliGenerate:
    def test_generate_petstore(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "petstore.yaml"), "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "PetsApi.sh").exists()
        assert "Translated 3 operations." in result.output

    def test_options_reach_script(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "petstore.yaml"),
            "-o", str(tmp_path),
            "--kong-host", "gw.example.com",
            "--kong-port", "9001",
            "--target-api-name", "pets",
        ])

        assert result.exit_code == 0, result.output
        script = (tmp_path / "PetsApi.sh").read_text()
        assert "http://gw.example.com:9001" in script
        assert "TARGET_API_NAME='pets'" in script

    def test_cli_overrides_config_file(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("kongHost: from-file\ntargetApiName: file-api\n")
        out = tmp_path / "out"

        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "petstore.yaml"),
            "-o", str(out),
            "-c", str(config),
            "--kong-host", "from-cli",
        ])

        assert result.exit_code == 0, result.output
        script = (out / "PetsApi.sh").read_text()
        assert "http://from-cli:8001" in script
        assert "TARGET_API_NAME='file-api'" in script

    def test_source_folder_and_package(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "store.yaml"),
            "-o", str(tmp_path),
            "--source-folder", "scripts",
            "--api-package", "gateway.kong",
        ])

        assert result.exit_code == 0, result.output
        folder = tmp_path / "scripts" / "gateway" / "kong"
        assert sorted(p.name for p in folder.iterdir()) == ["DefaultApi.sh", "StoreApi.sh"]

    def test_reserved_words_mapping(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "store.yaml"),
            "-o", str(tmp_path),
            "--reserved-words-mapping", "return=get_inventory",
        ])

        assert result.exit_code == 0, result.output
        assert "call_get_inventory()" in (tmp_path / "DefaultApi.sh").read_text()

    def test_mapping_onto_reserved_word_fails(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "store.yaml"),
            "-o", str(tmp_path),
            "--reserved-words-mapping", "return=exit",
        ])

        assert result.exit_code == 1
        assert "reserved" in result.output

    def test_malformed_path_fails(self, tmp_path):
        spec = tmp_path / "bad.yaml"
        spec.write_text(
            "openapi: 3.0.0\n"
            "info: {title: bad, version: '1'}\n"
            "paths:\n"
            "  /pets/{id:\n"
            "    get: {responses: {'200': {description: ok}}}\n"
            "  /pets:\n"
            "    get: {responses: {'200': {description: ok}}}\n"
        )
        out = tmp_path / "out"
        runner = CliRunner()

        result = runner.invoke(main, ["generate", str(spec), "-o", str(out)])
        assert result.exit_code == 1
        assert "/pets/{id" in result.output
        assert not out.exists()

        result = runner.invoke(main, ["generate", str(spec), "-o", str(out), "--skip-invalid"])
        assert result.exit_code == 0, result.output
        assert "Translated 1 operations." in result.output

    @patch("kong_codegen.cli.ScriptGenerator")
    def test_generator_receives_resolved_config(self, MockGen, tmp_path):
        MockGen.return_value.generate.return_value = {"DefaultApi.sh": "#!/bin/bash\n"}

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(FIXTURES / "store.yaml"), "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        config = MockGen.call_args[0][0]
        assert (config.host, config.port, config.target_api_name) == ("localhost", "8001", "myApi")
        assert (tmp_path / "DefaultApi.sh").exists()


class TestCliRoutes:
    def test_lists_routes(self):
        runner = CliRunner()
        result = runner.invoke(main, ["routes", str(FIXTURES / "store.yaml")])

        assert result.exit_code == 0, result.output
        assert (
            "GET /users/{id}/orders/{orderId} -> /users/$(uri_captures.{id})/orders/$(uri_captures.{orderId})"
            in result.output
        )
        assert "GET /inventory -> /inventory" in result.output


class TestParseMappings:
    def test_pairs(self):
        assert _parse_mappings(("return=ret", "local=loc")) == {"return": "ret", "local": "loc"}

    def test_invalid_pair(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "generate", str(FIXTURES / "store.yaml"),
            "-o", str(tmp_path),
            "--reserved-words-mapping", "return",
        ])
        assert result.exit_code == 2
