# SPDX-License-Identifier: Apache-2.0
"""Source generators: one per generated domain or API module."""

from __future__ import annotations

from .api import ApiGenerator
from .base import SourceGenerator
from .commands import CommandGenerator
from .entities import EntityGenerator
from .events import EventGenerator

__all__ = [
    "SourceGenerator",
    "EntityGenerator",
    "CommandGenerator",
    "EventGenerator",
    "ApiGenerator",
]
