"""CLI for Transform Camera."""

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Any

import yaml

from transform_camera.camera import TransformCamera, TransformCameraConfig
from transform_camera.exceptions import TransformCameraError
from transform_camera.processing.codec import MIME_JPEG, MIME_PNG
from transform_camera.processing.transforms import Transform, describe_transforms
from transform_camera.sources import create_source

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "source"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Transform Camera - apply an image transform pipeline to camera frames",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Grayscale and shrink a still image
  transform-camera --image photo.jpg -t grayscale -t resize:width=100,height=0 -o out.jpg

  # Pipeline from a config file, 10 webcam frames as PNG
  transform-camera --camera 0 --config camera.yaml -o frame.png --count 10

  # Show supported transforms
  transform-camera --list-transforms
""",
    )

    # Source type (mutually exclusive)
    input_group = parser.add_mutually_exclusive_group()
    input_group.add_argument(
        "--image",
        metavar="PATH",
        help="Still image file used as the source",
    )
    input_group.add_argument(
        "--camera",
        metavar="DEVICE",
        nargs="?",
        const="0",
        help="Camera device (default: 0)",
    )

    parser.add_argument(
        "--resolution",
        help="Camera resolution as WxH (e.g., 640x480)",
    )

    # Pipeline
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="YAML/JSON config with 'source' and 'pipeline'",
    )
    parser.add_argument(
        "--transform",
        "-t",
        action="append",
        default=[],
        metavar="SPEC",
        help="Append a transform, e.g. rotate:angle=90 (repeatable)",
    )
    parser.add_argument(
        "--list-transforms",
        action="store_true",
        help="List supported transforms and exit",
    )

    # Output
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output file (frame index is appended when --count > 1)",
    )
    parser.add_argument(
        "--mime-type",
        choices=[MIME_JPEG, MIME_PNG],
        help="Output encoding (default: from output file extension)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of frames to capture (default: 1)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=0.0,
        help="Seconds between frames (default: 0)",
    )

    # Logging
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug output",
    )

    args = parser.parse_args(argv)
    if args.count < 1:
        parser.error("--count must be at least 1")
    return args


def load_config(path: Path) -> TransformCameraConfig:
    """Load configuration from a YAML (or JSON) file.

    The ``source`` and ``pipeline`` keys may sit at the top level or under
    an ``attributes`` mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config must be a mapping: {path}")

    if "attributes" in data:
        data = data["attributes"] or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config attributes must be a mapping: {path}")

    config_dict: dict[str, Any] = {}
    if "source" in data:
        config_dict["source"] = data["source"]
    if "pipeline" in data:
        config_dict["pipeline"] = data["pipeline"]

    return TransformCameraConfig(**config_dict)


def parse_transform(spec: str) -> Transform:
    """Parse a transform spec of the form ``type[:key=value,...]``.

    Values are read as YAML scalars, so ``width=100`` gives an int and
    ``angle=-12.5`` a float.
    """
    transform_type, _, param_str = spec.partition(":")
    params: dict[str, Any] = {}

    for item in filter(None, (p.strip() for p in param_str.split(","))):
        key, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"Transform parameter must be key=value: {item!r}")
        params[key.strip()] = yaml.safe_load(value)

    return Transform(type=transform_type.strip(), params=params)


def parse_resolution(res_str: str | None) -> tuple[int, int] | None:
    """Parse resolution string to tuple."""
    if not res_str:
        return None
    parts = res_str.lower().split("x")
    if len(parts) != 2:
        raise ValueError("Resolution must be WxH")
    return (int(parts[0]), int(parts[1]))


def output_path(output: Path, index: int, count: int) -> Path:
    """Path for frame ``index``; numbered only when writing several frames."""
    if count <= 1:
        return output
    return output.with_name(f"{output.stem}_{index:04d}{output.suffix}")


def print_transforms() -> None:
    for entry in describe_transforms():
        params = ", ".join(entry["params"]) or "-"
        print(f"  {entry['type']:12} {params}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Setup logging
    log_level = logging.DEBUG if args.debug else (logging.INFO if args.verbose else logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if args.list_transforms:
        print("Available transforms:")
        print_transforms()
        return 0

    if args.image is None and args.camera is None:
        logger.error("A source is required: --image PATH or --camera [DEVICE]")
        return 1

    try:
        config = load_config(args.config) if args.config else TransformCameraConfig()
        extra_steps = [parse_transform(spec) for spec in args.transform]
        resolution = parse_resolution(args.resolution)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    config = config.model_copy(
        update={
            "source": config.source or DEFAULT_SOURCE_NAME,
            "pipeline": config.pipeline + extra_steps,
        }
    )

    # Build the upstream source under the name the config refers to
    if args.image is not None:
        source = create_source("image", name=config.source, path=args.image)
    else:
        try:
            device: int | str = int(args.camera)
        except ValueError:
            device = args.camera
        source = create_source(
            "camera", name=config.source, device=device, resolution=resolution
        )

    mime_type = args.mime_type
    if mime_type is None:
        suffix = args.output.suffix.lower() if args.output else ""
        mime_type = MIME_PNG if suffix == ".png" else MIME_JPEG

    try:
        with source:
            camera = TransformCamera("transform-camera", config, {source.name: source})
            try:
                for index in range(args.count):
                    if index and args.interval > 0:
                        time.sleep(args.interval)

                    data, metadata = camera.image(mime_type)

                    if args.output:
                        path = output_path(args.output, index, args.count)
                        path.write_bytes(data)
                        logger.info(f"Wrote {path} ({len(data)} bytes, {metadata.mime_type})")
                    else:
                        sys.stdout.buffer.write(data)
            finally:
                camera.close()
    except (TransformCameraError, OSError, RuntimeError) as e:
        logger.error(f"{e}")
        return 1
    except KeyboardInterrupt:
        pass

    return 0


if __name__ == "__main__":
    sys.exit(main())
