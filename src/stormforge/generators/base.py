# SPDX-License-Identifier: Apache-2.0
"""Common plumbing for the source generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List

from stormforge.ir.types import IRModel

from .fields import RenderContext, doc_text


class SourceGenerator(ABC):
    """Turns the IR into the text of one generated Python module.

    Generators read only the IR and the naming utilities; none of them
    depends on another generator's output.
    """

    #: One-line module docstring, formatted with the bounded-context name
    title: str = ""

    def __init__(self, model: IRModel):
        self.model = model
        self.ctx = RenderContext.from_model(model)

    @abstractmethod
    def blocks(self) -> List[str]:
        """Top-level code blocks of the module, in emission order."""
        ...

    def imports(self) -> str:
        return "from __future__ import annotations"

    def header(self) -> str:
        context = doc_text(self.model.bounded_context.name)
        return (
            f'"""{self.title.format(context=context)}\n'
            "\n"
            "Generated by StormForge from the domain model. Regeneration\n"
            "overwrites this file.\n"
            '"""'
        )

    def generate(self) -> str:
        return join_blocks([self.header(), self.imports(), *self.blocks()])


def join_blocks(blocks: Iterable[str]) -> str:
    """Join top-level blocks with two blank lines and end with a newline."""
    return "\n\n\n".join(block.rstrip("\n") for block in blocks if block) + "\n"
