"""Normalize command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import cv2
import numpy as np

from config import ARTIFACT_UPSCALE, CANVAS_SIZE, PAD_SIZE
from digitprep import NormalizeConfig, PipelineStepResults, build_pipeline, run_pipeline
from schemas import NormalizationReport
from sources import load_pixel_buffer, scan_local_images

logger = logging.getLogger(__name__)


def parse_size(value: str) -> tuple[int, int] | None:
    """Parse "WxH" into (width, height); "native" means keep the image size."""
    if value.lower() == "native":
        return None
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"size must look like 280x280 or 'native', got {value!r}"
        )
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError(f"size must be positive, got {value!r}")
    return width, height


def add_normalize_subparser(subparsers: argparse._SubParsersAction) -> None:
    normalize_parser = subparsers.add_parser(
        "normalize",
        help="Normalize an image file or directory into 28x28 digit vectors",
    )
    normalize_parser.add_argument(
        "source",
        help="Image file or directory of images",
    )
    normalize_parser.add_argument(
        "--blur",
        action="store_true",
        help="Apply the light Gaussian blur before normalizing",
    )
    normalize_parser.add_argument(
        "--no-center",
        action="store_true",
        help="Skip center-of-mass alignment",
    )
    normalize_parser.add_argument(
        "--size",
        type=parse_size,
        default=PAD_SIZE,
        metavar="WxH",
        help="Stretch images onto a pad of this size first (default: 280x280, 'native' to skip)",
    )
    normalize_parser.add_argument(
        "--json",
        action="store_true",
        help="Print one JSON report per image instead of the debug line",
    )
    normalize_parser.add_argument(
        "--vector",
        action="store_true",
        help="Include the 784-value vector in JSON reports",
    )
    normalize_parser.add_argument(
        "--artifact-dir",
        type=Path,
        help="Save every intermediate step as PNG under this directory",
    )
    normalize_parser.set_defaults(_cmd=cmd_normalize)


def _to_uint8(img: np.ndarray) -> np.ndarray:
    return np.clip(np.rint(img * 255.0), 0, 255).astype(np.uint8)


def save_artifacts(results: PipelineStepResults, out_dir: Path) -> dict[str, Path]:
    """Write the input and every step output as PNG files.

    Canvas-sized outputs are enlarged with nearest-neighbor so they stay
    readable. Returns a mapping of step key to written path.
    """
    out_dir.mkdir(parents=True, exist_ok=True)
    paths = {}

    original = cv2.cvtColor(results.original.as_array(), cv2.COLOR_RGBA2BGRA)
    paths["original"] = out_dir / "original.png"
    cv2.imwrite(str(paths["original"]), original)

    for index, step in enumerate(results.steps):
        image = _to_uint8(step.image)
        if image.shape == (CANVAS_SIZE, CANVAS_SIZE):
            image = cv2.resize(
                image,
                None,
                fx=ARTIFACT_UPSCALE,
                fy=ARTIFACT_UPSCALE,
                interpolation=cv2.INTER_NEAREST,
            )
        key = step.name.split("(")[0]
        paths[key] = out_dir / f"{index:02d}_{key}.png"
        cv2.imwrite(str(paths[key]), image)
    return paths


def cmd_normalize(args: argparse.Namespace) -> int:
    try:
        image_paths = scan_local_images(args.source)
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    if not image_paths:
        logger.error("No images found in %s", args.source)
        return 1

    config = NormalizeConfig(blur=args.blur, center=not args.no_center)
    failures = 0

    for image_path in image_paths:
        try:
            buffer = load_pixel_buffer(image_path, size=args.size)
        except (ValueError, OSError) as exc:
            logger.error("Skipping %s: %s", image_path, exc)
            failures += 1
            continue

        result = run_pipeline(buffer, config)

        if args.json:
            report = NormalizationReport.from_result(
                str(image_path), result, include_vector=args.vector
            )
            print(report.model_dump_json())
        else:
            print(f"{image_path.name}: {result.trace}")

        if args.artifact_dir:
            out_dir = args.artifact_dir / image_path.stem
            save_artifacts(build_pipeline(config).run(buffer), out_dir)
            logger.info("Artifacts saved to %s", out_dir)

    logger.debug("Normalized %d of %d images", len(image_paths) - failures, len(image_paths))
    return 1 if failures else 0
