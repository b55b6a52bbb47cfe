"""
Sequential executor for node pipelines.

Feeds an image through every node in order. The image returned by step N is
the input of step N+1. Optionally every step is reported through the module
logger and its result is written to a directory as ``output<N>.<ext>``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable

from pixelnodes.config import settings
from pixelnodes.errors import PipelineRunError

if TYPE_CHECKING:
    from pixelnodes.image import Image
    from .base import Node

logger = logging.getLogger(__name__)

LABEL_WIDTH = 20
"Width the diagnostic labels are right-aligned to"

BYTES_PER_MB = 1_000_000


@dataclass
class StepReport:
    """Diagnostics of a single executed step.

    :param step: 1-based index of the step
    :param name: Display name of the node
    :param other_info: Rendered node parameters
    :param input_description: Dimension description of the input image
    :param output_description: Dimension description of the output image
    :param artifact: Path of the intermediate artifact, if saved
    :param artifact_bytes: Size of the intermediate artifact in bytes
    """
    step: int
    name: str
    other_info: str = ''
    input_description: str = ''
    output_description: str = ''
    artifact: Path | None = None
    artifact_bytes: int | None = None

    @property
    def artifact_mb(self) -> float | None:
        """Artifact size in (decimal) megabytes."""
        if self.artifact_bytes is None:
            return None
        return self.artifact_bytes / BYTES_PER_MB

    def header_lines(self) -> list[str]:
        """Lines known before the node runs: name, parameters and input dimensions."""
        return [
            f"{'Node:':>{LABEL_WIDTH}} {self.name} {self.other_info}".rstrip(),
            f"{'Input dimensions:':>{LABEL_WIDTH}} {self.input_description}",
        ]

    def result_lines(self) -> list[str]:
        """Lines describing the step's result and its artifact, if saved."""
        lines = [f"{'Output dimensions:':>{LABEL_WIDTH}} {self.output_description}"]
        if self.artifact is not None:
            lines.append(f"{'Save as:':>{LABEL_WIDTH}} {self.artifact}")
            if self.artifact_mb is not None:
                lines.append(f"{'Output size:':>{LABEL_WIDTH}} {self.artifact_mb:.3f} MB")
        return lines

    def to_lines(self) -> list[str]:
        """Render the report as human-readable diagnostic lines."""
        return self.header_lines() + self.result_lines()


def _save_intermediate(image: 'Image', save_dir: Path, step: int) -> Path:
    """Write the intermediate result of a step, creating the directory if needed."""
    if not save_dir.exists():
        save_dir.mkdir(parents=True, exist_ok=True)
    return image.write(save_dir / f"{settings.INTERMEDIATE_PREFIX}{step}")


def run_pipeline(
    image: 'Image',
    nodes: Iterable['Node'],
    log_steps: bool = False,
    save_intermediate: bool = False,
    save_dir: str | os.PathLike = '.',
    on_step: Callable[[StepReport], None] | None = None,
) -> 'Image':
    """Apply all nodes to an image in sequence.

    Nodes do not modify their input, so ``image`` itself is left untouched.

    :param image: The input image
    :param nodes: The nodes in execution order. An empty sequence returns the
        input image.
    :param log_steps: Log per-step diagnostics (name, parameters, dimensions and
        artifacts) at INFO level
    :param save_intermediate: Write the result of every step to ``save_dir``
        as ``output<step>.<ext>``
    :param save_dir: Directory for intermediate artifacts, created on demand
    :param on_step: Optional callback receiving the report of every step
    :returns: The image returned by the last node
    :raises PipelineRunError: If a step fails. No further steps are executed.
    """
    save_dir = Path(save_dir)
    nodes = list(nodes)
    if log_steps:
        logger.info(f"Running pipeline of {len(nodes)} node(s) on {image}")

    current = image
    for index, node in enumerate(nodes):
        step = index + 1
        report = StepReport(
            step=step,
            name=node.name,
            other_info=node.other_info,
            input_description=str(current),
        )
        if log_steps:
            for line in report.header_lines():
                logger.info(line)
        try:
            current = node.process(current)
        except Exception as e:
            raise PipelineRunError(step, node.name, str(e)) from e
        report.output_description = str(current)

        if save_intermediate:
            try:
                artifact = _save_intermediate(current, save_dir, step)
                report.artifact = artifact
                report.artifact_bytes = artifact.stat().st_size
            except (OSError, ValueError) as e:
                raise PipelineRunError(step, node.name, f"could not save intermediate image: {e}") from e

        if log_steps:
            for line in report.result_lines():
                logger.info(line)
        if on_step is not None:
            on_step(report)

    logger.info(f"Finished processing {len(nodes)} node(s)")
    return current


__all__ = ['StepReport', 'run_pipeline']
