# SPDX-License-Identifier: Apache-2.0
"""Service generation command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from stormforge.config import ConfigVersionError, GeneratorConfig, load_config
from stormforge.errors import StormForgeError
from stormforge.ir import parse_file
from stormforge.project import ProjectAssembler
from stormforge.project.scaffolding import package_name as resolve_package_name

from .common import configure_logging, print_summary


def _load_settings(
    config_path: Optional[Path], package_name: Optional[str], port: Optional[int]
) -> GeneratorConfig:
    try:
        settings = load_config(config_path) if config_path else GeneratorConfig()
        return settings.merge_overrides(package_name=package_name, service_port=port)
    except (ConfigVersionError, FileNotFoundError, ValueError) as e:
        print(f"❌ Invalid configuration: {e}")
        raise typer.Exit(1) from e


def _generate_impl(
    input_path: Path,
    output_dir: Path,
    config_path: Optional[Path] = None,
    package_name: Optional[str] = None,
    port: Optional[int] = None,
    verbose: bool = False,
) -> None:
    """Implementation of the generate functionality."""
    configure_logging(verbose)
    settings = _load_settings(config_path, package_name, port)

    print(f"🔍 Reading domain model: {input_path}")
    try:
        model = parse_file(input_path)
    except StormForgeError as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e

    print_summary(model)

    print(f"\n🛠️  Generating service into {output_dir}")
    try:
        written = ProjectAssembler(settings).generate(model, output_dir)
    except StormForgeError as e:
        print(f"❌ {e}")
        raise typer.Exit(1) from e

    package = resolve_package_name(model, settings)
    print(f"✅ Generated {len(written)} files in {output_dir}")
    print("\n💡 Next steps:")
    print(f"  cd {output_dir}")
    print('  pip install -e ".[dev]"')
    print(f"  python -m {package}.main")
    print(f"  open http://localhost:{settings.service_port}/swagger-ui")


def generate(
    input_path: Path = typer.Option(
        ..., "--input", "-i", help="Domain model document (YAML or JSON)"
    ),
    output_dir: Path = typer.Option(
        ..., "--output", "-o", help="Directory to write the generated service into"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Generator settings YAML file"
    ),
    package_name: Optional[str] = typer.Option(
        None, "--package-name", help="Import package name of the generated service"
    ),
    port: Optional[int] = typer.Option(
        None, "--port", help="Port the generated service listens on"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Generate a service project from a domain model document.

    Examples:
      stormforge generate -i order.yaml -o ./order-service
      stormforge generate -i order.yaml -o ./out --port 8080 --package-name orders
      stormforge generate -i order.yaml -o ./out --config stormforge.yaml
    """
    _generate_impl(
        input_path=input_path,
        output_dir=output_dir,
        config_path=config_path,
        package_name=package_name,
        port=port,
        verbose=verbose,
    )
