"""
pixelnodes - A configurable, line-oriented image processing pipeline for Python
"""

from .image import Image, ImageSourceTypes, ColorTypes, SUPPORTED_IMAGE_FILETYPES
from .config import Settings, settings
from .errors import PixelNodesError, PipelineParseError, NodeBoundsError, PipelineRunError
from .nodes import (
    Node,
    GreyScale,
    Normalise,
    Vignette,
    Noise,
    Crop,
    Pipeline,
    StepReport,
    load_definition,
    parse_lines,
    run_pipeline,
)

__all__ = [
    # Core Image class
    "Image",
    "ImageSourceTypes",
    "ColorTypes",
    "SUPPORTED_IMAGE_FILETYPES",
    # Configuration
    "Settings",
    "settings",
    # Errors
    "PixelNodesError",
    "PipelineParseError",
    "NodeBoundsError",
    "PipelineRunError",
    # Nodes
    "Node",
    "GreyScale",
    "Normalise",
    "Vignette",
    "Noise",
    "Crop",
    # Pipelines
    "Pipeline",
    "StepReport",
    "load_definition",
    "parse_lines",
    "run_pipeline",
]

__version__ = "0.1.0"
