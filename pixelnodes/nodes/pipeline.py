# pixelnodes Nodes - Pipeline
"""
Pipeline for chaining multiple nodes.

A pipeline is a strictly linear, ordered sequence of nodes. It can be
parsed from and rendered back to the line-oriented definition format.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, TYPE_CHECKING

from .base import Node
from .executor import StepReport, run_pipeline
from .parser import load_definition, parse_lines

if TYPE_CHECKING:
    from pixelnodes.image import Image


@dataclass
class Pipeline:
    """Ordered sequence of nodes, executed first to last."""

    nodes: list[Node] = field(default_factory=list)

    def run(
        self,
        image: 'Image',
        log_steps: bool = False,
        save_intermediate: bool = False,
        save_dir: str | os.PathLike = '.',
        on_step: Callable[[StepReport], None] | None = None,
    ) -> 'Image':
        """Apply all nodes in sequence, see :func:`run_pipeline`."""
        return run_pipeline(
            image,
            self.nodes,
            log_steps=log_steps,
            save_intermediate=save_intermediate,
            save_dir=save_dir,
            on_step=on_step,
        )

    def append(self, node: Node) -> 'Pipeline':
        """Add node to pipeline (chainable)."""
        self.nodes.append(node)
        return self

    def extend(self, nodes: list[Node]) -> 'Pipeline':
        """Add multiple nodes to pipeline (chainable)."""
        self.nodes.extend(nodes)
        return self

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self.nodes)

    def __getitem__(self, index: int) -> Node:
        return self.nodes[index]

    def describe(self) -> list[dict[str, Any]]:
        """List the steps with their 1-based index, name and parameters."""
        return [
            {'step': i + 1, 'name': node.name, 'other_info': node.other_info}
            for i, node in enumerate(self.nodes)
        ]

    @classmethod
    def parse(cls, text: str, strict: bool | None = None) -> 'Pipeline':
        """Parse a definition text into a pipeline.

        Examples:
            'node=greyscale\\nnode=crop origin=0x0 size=8x8'
        """
        if not text:
            return cls()
        text = text.removeprefix('\ufeff')
        return cls(nodes=parse_lines(text.splitlines(), strict=strict))

    @classmethod
    def load(cls, path: str | os.PathLike, strict: bool | None = None) -> 'Pipeline':
        """Load a pipeline from a UTF-8 definition file."""
        return cls(nodes=load_definition(path, strict=strict))

    def to_text(self) -> str:
        """Convert pipeline to its definition text, one line per node."""
        return ''.join(f'{node.to_line()}\n' for node in self.nodes)

    def save(self, path: str | os.PathLike) -> None:
        """Write the pipeline definition to a UTF-8 file."""
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_text())


__all__ = ['Pipeline']
