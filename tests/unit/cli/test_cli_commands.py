# SPDX-License-Identifier: Apache-2.0
"""Tests for the generate and validate CLI commands."""

from __future__ import annotations

from pathlib import Path

import yaml
from typer.testing import CliRunner

from stormforge.cli import app

runner = CliRunner()


class TestValidateCommand:
    def test_valid_document(self, write_document, order_document: str):
        path = write_document(order_document)

        result = runner.invoke(app, ["validate", "--input", str(path)])

        assert result.exit_code == 0
        assert "✅ Domain model is valid" in result.stdout
        assert "Bounded context: OrderManagement" in result.stdout
        assert "Namespace: com.example.orders" in result.stdout
        assert "IR version: 1.0" in result.stdout
        assert "Commands: 2" in result.stdout
        assert "External subscriptions: 1" in result.stdout

    def test_invalid_version(self, write_document):
        path = write_document(
            "version: '1'\nbounded_context: {name: A, namespace: a.b}\n"
        )

        result = runner.invoke(app, ["validate", "-i", str(path)])

        assert result.exit_code == 1
        assert "❌ Invalid version format" in result.stdout

    def test_missing_file(self, tmp_path: Path):
        result = runner.invoke(app, ["validate", "-i", str(tmp_path / "nope.yaml")])

        assert result.exit_code == 1
        assert "❌ IR document not found" in result.stdout

    def test_malformed_document(self, write_document):
        path = write_document("version: [oops")

        result = runner.invoke(app, ["validate", "-i", str(path)])

        assert result.exit_code == 1
        assert "Failed to parse IR document" in result.stdout

    def test_writes_nothing(self, tmp_path: Path, write_document, order_document: str):
        path = write_document(order_document)

        runner.invoke(app, ["validate", "-i", str(path)])

        assert sorted(p.name for p in tmp_path.iterdir()) == ["domain.yaml"]


class TestGenerateCommand:
    def test_generates_project(self, tmp_path: Path, write_document, order_document: str):
        path = write_document(order_document)
        out = tmp_path / "service"

        result = runner.invoke(app, ["generate", "-i", str(path), "-o", str(out)])

        assert result.exit_code == 0
        assert "Bounded context: OrderManagement" in result.stdout
        assert "Aggregates: 1" in result.stdout
        assert "Value objects: 3" in result.stdout
        assert "✅ Generated 13 files" in result.stdout
        assert "python -m order_management.main" in result.stdout
        assert (out / "src" / "domain" / "commands.py").is_file()

    def test_overrides_apply(self, tmp_path: Path, write_document, minimal_document: str):
        path = write_document(minimal_document)
        out = tmp_path / "service"

        result = runner.invoke(
            app,
            ["generate", "-i", str(path), "-o", str(out), "--port", "8080", "--package-name", "hello"],
        )

        assert result.exit_code == 0
        main = (out / "src" / "main.py").read_text(encoding="utf-8")
        assert "SERVICE_PORT = 8080" in main
        assert 'package-dir = {"hello" = "src"}' in (out / "pyproject.toml").read_text(encoding="utf-8")

    def test_config_file(self, tmp_path: Path, write_document, minimal_document: str):
        path = write_document(minimal_document)
        config = tmp_path / "stormforge.yaml"
        config.write_text(yaml.safe_dump({"config-version": "1", "api-prefix": "/v2"}))
        out = tmp_path / "service"

        result = runner.invoke(
            app, ["generate", "-i", str(path), "-o", str(out), "--config", str(config)]
        )

        assert result.exit_code == 0
        assert 'API_PREFIX = "/v2"' in (out / "src" / "main.py").read_text(encoding="utf-8")

    def test_invalid_config(self, tmp_path: Path, write_document, minimal_document: str):
        path = write_document(minimal_document)
        config = tmp_path / "stormforge.yaml"
        config.write_text(yaml.safe_dump({"config_version": "1", "colour": "blue"}))

        result = runner.invoke(
            app, ["generate", "-i", str(path), "-o", str(tmp_path / "out"), "-c", str(config)]
        )

        assert result.exit_code == 1
        assert "❌ Invalid configuration" in result.stdout

    def test_invalid_port(self, tmp_path: Path, write_document, minimal_document: str):
        path = write_document(minimal_document)

        result = runner.invoke(
            app, ["generate", "-i", str(path), "-o", str(tmp_path / "out"), "--port", "70000"]
        )

        assert result.exit_code == 1
        assert not (tmp_path / "out").exists()

    def test_validation_failure_writes_nothing(self, tmp_path: Path, write_document):
        path = write_document("version: '1.0'\nbounded_context: {name: '', namespace: a.b}\n")
        out = tmp_path / "out"

        result = runner.invoke(app, ["generate", "-i", str(path), "-o", str(out)])

        assert result.exit_code == 1
        assert "❌ Bounded context name cannot be empty" in result.stdout
        assert not out.exists()

    def test_validate_and_generate_agree(self, tmp_path: Path, write_document):
        path = write_document("version: '10'\nbounded_context: {name: A, namespace: a.b}\n")

        validate = runner.invoke(app, ["validate", "-i", str(path)])
        generate = runner.invoke(app, ["generate", "-i", str(path), "-o", str(tmp_path / "out")])

        assert validate.exit_code == generate.exit_code == 1


class TestHelp:
    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "generate" in result.stdout
        assert "validate" in result.stdout
