"""
Exceptions raised while parsing and running node pipelines.
"""

from __future__ import annotations


class PixelNodesError(Exception):
    """Base class for all pixelnodes errors."""


class PipelineParseError(PixelNodesError, ValueError):
    """A pipeline definition line could not be parsed.

    :param line_number: The 1-based physical line number
    :param line: The raw line content
    :param reason: What is wrong with the line
    """

    def __init__(self, line_number: int, line: str, reason: str):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(f"line {line_number}: {reason}: {line!r}")


class NodeBoundsError(PixelNodesError, IndexError):
    """A node tried to sample pixels outside of its input image."""


class PipelineRunError(PixelNodesError):
    """A pipeline step failed. The original exception is chained as cause.

    :param step: The 1-based index of the failing step
    :param node_name: The display name of the failing node
    :param reason: Description of the failure
    """

    def __init__(self, step: int, node_name: str, reason: str):
        self.step = step
        self.node_name = node_name
        self.reason = reason
        super().__init__(f"step {step} ({node_name}) failed: {reason}")


__all__ = [
    "PixelNodesError",
    "PipelineParseError",
    "NodeBoundsError",
    "PipelineRunError",
]
