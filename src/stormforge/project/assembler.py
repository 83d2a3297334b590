# SPDX-License-Identifier: Apache-2.0
"""Assembles the generated service: renders every file, then writes them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from stormforge.config import GeneratorConfig
from stormforge.errors import GeneratorIOError
from stormforge.generators import ApiGenerator, CommandGenerator, EntityGenerator, EventGenerator
from stormforge.ir.types import IRModel

from . import scaffolding

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DIRECTORIES: Tuple[str, ...] = (
    "src",
    "src/domain",
    "src/api",
    "src/infrastructure",
    "src/repository",
    "tests",
)


@dataclass(frozen=True)
class GeneratedProject:
    """Fully rendered project, held in memory until written.

    ``files`` maps POSIX paths relative to the output directory to file text.
    """

    package: str
    files: Dict[str, str] = field(default_factory=dict)
    directories: Tuple[str, ...] = DIRECTORIES

    def paths(self) -> List[str]:
        return sorted(self.files)


def render_project(model: IRModel, settings: Optional[GeneratorConfig] = None) -> GeneratedProject:
    """Render every file of the generated project without touching the filesystem.

    Args:
        model: Validated IR
        settings: Generator settings; defaults apply when omitted

    Returns:
        GeneratedProject with the complete file set
    """
    settings = settings or GeneratorConfig()

    files = {
        "pyproject.toml": scaffolding.render_manifest(model, settings),
        "src/__init__.py": scaffolding.render_library_root(model),
        "src/main.py": scaffolding.render_main(model, settings),
        "src/domain/__init__.py": scaffolding.render_domain_init(model),
        "src/domain/entities.py": EntityGenerator(model).generate(),
        "src/domain/commands.py": CommandGenerator(model).generate(),
        "src/domain/events.py": EventGenerator(model).generate(),
        "src/api/__init__.py": scaffolding.render_api_init(),
        "src/api/routes.py": ApiGenerator(model).generate(),
        "src/infrastructure/__init__.py": scaffolding.render_infrastructure_init(),
        "src/infrastructure/event_store.py": scaffolding.EVENT_STORE,
        "src/repository/__init__.py": scaffolding.REPOSITORY,
        "README.md": scaffolding.render_readme(model, settings),
    }

    package = scaffolding.package_name(model, settings)
    logger.info(f"Rendered {len(files)} files for package {package}")
    return GeneratedProject(package=package, files=files)


def write_project(project: GeneratedProject, output_dir: PathLike) -> List[Path]:
    """Create the directory layout and write every file, overwriting.

    Args:
        project: Rendered project
        output_dir: Root directory of the generated project

    Returns:
        Written file paths in name order

    Raises:
        GeneratorIOError: On the first directory or file that cannot be written
    """
    root = Path(output_dir)

    for directory in (".", *project.directories):
        path = root / directory
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GeneratorIOError(path, f"Failed to create directory ({e})") from e

    written: List[Path] = []
    for relative in project.paths():
        path = root / relative
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(project.files[relative], encoding="utf-8")
        except OSError as e:
            raise GeneratorIOError(path, f"Failed to write file ({e})") from e
        logger.debug(f"Wrote {path}")
        written.append(path)

    logger.info(f"Wrote {len(written)} files to {root}")
    return written


class ProjectAssembler:
    """Renders a validated IR into a service project on disk."""

    def __init__(self, settings: Optional[GeneratorConfig] = None):
        self.settings = settings or GeneratorConfig()

    def render(self, model: IRModel) -> GeneratedProject:
        return render_project(model, self.settings)

    def generate(self, model: IRModel, output_dir: PathLike) -> List[Path]:
        """Render everything in memory first, then write it under ``output_dir``."""
        project = self.render(model)
        return write_project(project, output_dir)
