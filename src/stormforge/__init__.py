# SPDX-License-Identifier: Apache-2.0
"""StormForge: domain-model to service-skeleton generator."""

import logging

from .errors import GeneratorIOError, IRValidationError, ParseError, StormForgeError

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "GeneratorIOError",
    "IRValidationError",
    "ParseError",
    "StormForgeError",
    "__version__",
]
