# pixelnodes Nodes
"""
Node system for pixelnodes.

Provides the node types a pipeline is built from, the definition parser and
the sequential executor.

Example:
    from pixelnodes.nodes import Pipeline, GreyScale, Crop

    pipeline = Pipeline([GreyScale(), Crop(10, 20, 30, 40)])
    result = pipeline.run(image)

    # Or parse from a definition
    pipeline = Pipeline.parse('node=greyscale\\nnode=crop origin=10x20 size=30x40')
"""

from .base import DECLARATION_TAG, NODE_REGISTRY, Node, parse_pair, register_node
from .color import GreyScale, Normalise, Vignette
from .noise import NOISE_BAND_LIMIT, Noise, noise_band
from .geometric import Crop
from .parser import (
    LineKind,
    PARAMETERLESS_FALLBACK,
    PARAMETERIZED_FALLBACK,
    classify_line,
    load_definition,
    parse_line,
    parse_lines,
)
from .executor import StepReport, run_pipeline
from .pipeline import Pipeline

__all__ = [
    # Base
    'DECLARATION_TAG',
    'NODE_REGISTRY',
    'Node',
    'parse_pair',
    'register_node',
    # Nodes
    'GreyScale',
    'Normalise',
    'Vignette',
    'Noise',
    'NOISE_BAND_LIMIT',
    'noise_band',
    'Crop',
    # Parsing
    'LineKind',
    'PARAMETERLESS_FALLBACK',
    'PARAMETERIZED_FALLBACK',
    'classify_line',
    'load_definition',
    'parse_line',
    'parse_lines',
    # Execution
    'StepReport',
    'run_pipeline',
    'Pipeline',
]
