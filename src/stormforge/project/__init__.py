# SPDX-License-Identifier: Apache-2.0
"""Generated-project assembly and scaffolding."""

from __future__ import annotations

from .assembler import DIRECTORIES, GeneratedProject, ProjectAssembler, render_project, write_project

__all__ = [
    "DIRECTORIES",
    "GeneratedProject",
    "ProjectAssembler",
    "render_project",
    "write_project",
]
