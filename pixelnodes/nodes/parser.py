# pixelnodes Nodes - Definition Parser
"""
Parser for line-oriented pipeline definitions.

Syntax, one node per line:

    node=greyscale
    node=normalise
    node=vignette
    node=noise noise_amount=0.25
    node=crop origin=10x20 size=30x40

- A line with exactly one ``=`` declares a parameterless node.
- A line with more than one ``=`` declares a parameterized node; tokens are
  whitespace separated ``label=value`` pairs, in the node's label order.
- Blank lines and lines starting with ``#`` are ignored.

Unknown keywords fall back to :class:`Vignette` (parameterless form) or
:class:`Crop` (parameterized form) and log a warning. In strict mode they
raise a :class:`PipelineParseError` instead.
"""

from __future__ import annotations

import codecs
import logging
import os
from enum import Enum
from typing import Iterable

from pixelnodes.config import settings
from pixelnodes.errors import PipelineParseError
from .base import DECLARATION_TAG, NODE_REGISTRY, Node
from .color import Vignette
from .geometric import Crop

logger = logging.getLogger(__name__)

PARAMETERLESS_FALLBACK: type[Node] = Vignette
"Node used for unknown keywords in the parameterless form"

PARAMETERIZED_FALLBACK: type[Node] = Crop
"Node used for unknown keywords in the parameterized form"

COMMENT_PREFIX = '#'


class LineKind(Enum):
    """Classification of a definition line."""
    SKIP = 'skip'                    # blank or comment
    PARAMETERLESS = 'parameterless'  # node=<keyword>
    PARAMETERIZED = 'parameterized'  # node=<keyword> label=value ...


def classify_line(line: str) -> LineKind:
    """Classify a definition line by its number of ``=`` characters.

    :raises ValueError: If a non-blank line contains no ``=`` at all.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_PREFIX):
        return LineKind.SKIP
    count = stripped.count('=')
    if count == 0:
        raise ValueError("expected a node declaration like 'node=<keyword>'")
    if count == 1:
        return LineKind.PARAMETERLESS
    return LineKind.PARAMETERIZED


def _split_declaration(token: str) -> str:
    """Split ``node=<keyword>`` and return the keyword."""
    tag, _, keyword = token.partition('=')
    if tag.strip() != DECLARATION_TAG:
        raise ValueError(f"expected declaration tag '{DECLARATION_TAG}=', got '{tag.strip()}='")
    parts = keyword.split()
    if not parts:
        raise ValueError("missing node keyword")
    if len(parts) > 1:
        raise ValueError(f"unexpected text after node keyword '{parts[0]}'")
    return parts[0]


def _resolve(
    keyword: str,
    fallback: type[Node],
    line_number: int,
    line: str,
    strict: bool,
) -> type[Node]:
    node_cls = NODE_REGISTRY.get(keyword)
    if node_cls is not None:
        return node_cls
    if strict:
        raise PipelineParseError(line_number, line, f"unknown node keyword '{keyword}'")
    logger.warning(
        f"Line {line_number}: unknown node keyword '{keyword}', "
        f"falling back to {fallback.__name__}"
    )
    return fallback


def _parse_parameterless(line: str, line_number: int, strict: bool) -> Node:
    try:
        keyword = _split_declaration(line)
    except ValueError as e:
        raise PipelineParseError(line_number, line, str(e)) from e
    node_cls = _resolve(keyword, PARAMETERLESS_FALLBACK, line_number, line, strict)
    if node_cls.is_parameterized():
        labels = ', '.join(node_cls.labels())
        raise PipelineParseError(
            line_number, line, f"'{keyword}' requires the parameters {labels}"
        )
    return node_cls()


def _parse_parameterized(line: str, line_number: int, strict: bool) -> Node:
    tokens = line.split()
    try:
        keyword = _split_declaration(tokens[0])
    except ValueError as e:
        raise PipelineParseError(line_number, line, str(e)) from e
    node_cls = _resolve(keyword, PARAMETERIZED_FALLBACK, line_number, line, strict)
    labels = node_cls.labels()
    if not labels:
        raise PipelineParseError(line_number, line, f"'{keyword}' takes no parameters")
    arguments = tokens[1:]
    if len(arguments) != len(labels):
        raise PipelineParseError(
            line_number,
            line,
            f"'{node_cls.keyword()}' expects {len(labels)} parameter(s) "
            f"({', '.join(labels)}), got {len(arguments)}",
        )

    values = {}
    for label, argument in zip(labels, arguments):
        key, sep, value = argument.partition('=')
        if not sep or key != label:
            raise PipelineParseError(
                line_number, line, f"expected '{label}=<value>', got '{argument}'"
            )
        values[label] = value

    try:
        return node_cls.from_values(values)
    except ValueError as e:
        raise PipelineParseError(line_number, line, f"invalid value: {e}") from e


def parse_line(line: str, line_number: int = 1, strict: bool | None = None) -> Node | None:
    """Parse a single definition line.

    :param line: The raw line
    :param line_number: The 1-based line number used in error messages
    :param strict: Raise on unknown keywords. Defaults to settings.STRICT_KEYWORDS
    :returns: The node, or None for blank and comment lines
    :raises PipelineParseError: If the line is malformed
    """
    strict = settings.STRICT_KEYWORDS if strict is None else strict
    line = line.rstrip('\r\n')
    try:
        kind = classify_line(line)
    except ValueError as e:
        raise PipelineParseError(line_number, line, str(e)) from e

    if kind is LineKind.SKIP:
        return None
    if kind is LineKind.PARAMETERLESS:
        return _parse_parameterless(line, line_number, strict)
    return _parse_parameterized(line, line_number, strict)


def parse_lines(lines: Iterable[str], strict: bool | None = None) -> list[Node]:
    """Parse definition lines into nodes, in line order.

    :raises PipelineParseError: For the first malformed line
    """
    nodes = []
    for line_number, line in enumerate(lines, start=1):
        node = parse_line(line, line_number, strict=strict)
        if node is not None:
            nodes.append(node)
    return nodes


def _decode_lines(data: bytes) -> list[str]:
    """Decode a UTF-8 definition into lines, skipping a leading byte order mark.

    :raises PipelineParseError: For the first line that is not valid UTF-8
    """
    lines = []
    for line_number, raw in enumerate(data.removeprefix(codecs.BOM_UTF8).splitlines(), start=1):
        try:
            lines.append(raw.decode('utf-8'))
        except UnicodeDecodeError as e:
            raise PipelineParseError(
                line_number,
                raw.decode('utf-8', errors='replace'),
                f"invalid UTF-8 byte 0x{raw[e.start]:02x} at offset {e.start}",
            ) from e
    return lines


def load_definition(path: str | os.PathLike, strict: bool | None = None) -> list[Node]:
    """Load a UTF-8 pipeline definition file.

    A leading byte order mark is ignored.

    :param path: The definition file
    :param strict: Raise on unknown keywords. Defaults to settings.STRICT_KEYWORDS
    :raises PipelineParseError: For the first malformed or undecodable line
    """
    with open(path, 'rb') as f:
        data = f.read()
    nodes = parse_lines(_decode_lines(data), strict=strict)
    logger.debug(f"Loaded {len(nodes)} node(s) from {path}")
    return nodes


__all__ = [
    'LineKind',
    'PARAMETERLESS_FALLBACK',
    'PARAMETERIZED_FALLBACK',
    'classify_line',
    'load_definition',
    'parse_line',
    'parse_lines',
]
