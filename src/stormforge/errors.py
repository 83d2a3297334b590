# SPDX-License-Identifier: Apache-2.0
"""Error taxonomy for the StormForge generator.

Every error raised by the pipeline is fatal: nothing is retried and nothing
is downgraded to a warning. The CLI reports the message and exits non-zero.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

PathLike = Union[str, Path]


class StormForgeError(Exception):
    """Base class for all generator errors."""

    pass


class ParseError(StormForgeError):
    """Document is malformed or cannot be deserialized into the IR."""

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        if source:
            message = f"Failed to parse IR document {source}: {message}"
        else:
            message = f"Failed to parse IR document: {message}"
        super().__init__(message)


class IRValidationError(StormForgeError):
    """IR is structurally present but violates an invariant."""

    def __init__(self, rule: str, message: str):
        self.rule = rule
        super().__init__(message)


class GeneratorIOError(StormForgeError):
    """Read or write failure, reported with the path involved."""

    def __init__(self, path: PathLike, message: str):
        self.path = Path(path)
        super().__init__(f"{message}: {path}")
