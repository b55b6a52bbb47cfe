# pixelnodes Nodes - Base Classes
"""
Base class and keyword registry for pipeline nodes.

A node is one immutable image transformation step. All nodes are frozen
dataclasses; the set of node kinds is closed and known through the
keyword registry which the pipeline parser resolves against.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, TYPE_CHECKING

if TYPE_CHECKING:
    from pixelnodes.image import Image

DECLARATION_TAG = 'node'
"Key which marks a pipeline definition line as node declaration: ``node=<keyword>``"

# Global registry: keyword -> node class
NODE_REGISTRY: dict[str, type['Node']] = {}


def register_node(cls: type['Node']) -> type['Node']:
    """Decorator to register a node class under its keyword."""
    if not cls._keyword:
        raise ValueError(f"{cls.__name__} does not define a keyword")
    NODE_REGISTRY[cls._keyword] = cls
    return cls


@dataclass(frozen=True)
class Node(ABC):
    """Base class for all nodes.

    Nodes declare how they appear in a pipeline definition via class variables:
        _keyword: The keyword following the declaration tag, e.g. 'crop'
        _display_name: The human readable name used in diagnostics
        _labels: The parameter labels in definition order, empty for
            parameterless nodes

    Example:
        @register_node
        @dataclass(frozen=True)
        class Invert(Node):
            _keyword: ClassVar[str] = 'invert'
            _display_name: ClassVar[str] = 'Invert'

            def process(self, image: Image) -> Image:
                ...
    """

    _keyword: ClassVar[str] = ''
    _display_name: ClassVar[str] = ''
    _labels: ClassVar[tuple[str, ...]] = ()

    @abstractmethod
    def process(self, image: 'Image') -> 'Image':
        """Apply the node to an image and return the result.

        Nodes never modify the input image and never keep a reference to
        it once this call returns.

        :param image: The input image.
        :returns: The processed image.
        """
        pass

    def __call__(self, image: 'Image') -> 'Image':
        return self.process(image)

    @property
    def name(self) -> str:
        """Display name of the node."""
        return self._display_name or self.__class__.__name__

    @property
    def other_info(self) -> str:
        """Rendered parameters, empty for parameterless nodes."""
        return ''

    @classmethod
    def keyword(cls) -> str:
        """The keyword used for this node in pipeline definitions."""
        return cls._keyword

    @classmethod
    def labels(cls) -> tuple[str, ...]:
        """Parameter labels in the order they appear in a definition line."""
        return cls._labels

    @classmethod
    def is_parameterized(cls) -> bool:
        """Whether the definition line of this node carries parameters."""
        return len(cls._labels) > 0

    @classmethod
    def from_values(cls, values: dict[str, str]) -> 'Node':
        """Create the node from the raw parameter values of a definition line.

        :param values: Mapping of parameter label to raw literal.
        :raises ValueError: If a literal can not be parsed.
        """
        return cls()

    def to_values(self) -> dict[str, str]:
        """Render the parameters as raw literals, inverse of :meth:`from_values`."""
        return {}

    def to_line(self) -> str:
        """Convert the node to its pipeline definition line.

            'node=greyscale'
            'node=crop origin=10x20 size=30x40'
        """
        parts = [f'{DECLARATION_TAG}={self._keyword}']
        for label, value in self.to_values().items():
            parts.append(f'{label}={value}')
        return ' '.join(parts)


def parse_pair(text: str) -> tuple[int, int]:
    """Parse an integer pair separated by ``x``.

    Examples:
        '10x20' -> (10, 20)
        '-3x4'  -> (-3, 4)
    """
    parts = text.split('x')
    if len(parts) != 2:
        raise ValueError(f"Expected a pair like '10x20', got {text!r}")
    return int(parts[0]), int(parts[1])


__all__ = [
    'DECLARATION_TAG',
    'NODE_REGISTRY',
    'Node',
    'parse_pair',
    'register_node',
]
