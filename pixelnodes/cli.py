"""
Command line interface: run a pipeline definition on an image.

Usage:
    pixelnodes cat.png pipeline.txt --logging --save-intermediate --save-dir testing

The final image is written as ``<output-dir>/finalOutput.<ext>``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import settings
from .errors import PixelNodesError
from .image import Image
from .nodes import Pipeline

logger = logging.getLogger(__name__)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="pixelnodes",
        description="Apply a line-oriented node pipeline to an image",
    )
    p.add_argument("image", type=str, help="Path of the input image")
    p.add_argument("pipeline", type=str, help="Path of the pipeline definition file")
    p.add_argument("--logging", action="store_true", help="Log the details of every node")
    p.add_argument("--save-intermediate", action="store_true",
                   help="Save the image after every node")
    p.add_argument("--save-dir", type=str, default="intermediate",
                   help="Folder for intermediate images")
    p.add_argument("--output-dir", type=str, default=".", help="Folder for the final image")
    p.add_argument("--strict", action="store_true",
                   help="Reject unknown node keywords instead of falling back")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_argparser().parse_args(argv)
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(message)s")

    try:
        image = Image(args.image)
        pipeline = Pipeline.load(args.pipeline, strict=True if args.strict else None)
        output = pipeline.run(
            image,
            log_steps=args.logging,
            save_intermediate=args.save_intermediate,
            save_dir=args.save_dir,
        )
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        target = output.write(output_dir / settings.FINAL_OUTPUT_NAME)
    except (PixelNodesError, OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        return 1

    logger.info(f"Image is saved as {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
