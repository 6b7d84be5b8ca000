"""
Command-line interface for thermal-capture.
"""

import argparse
import logging
import sys

from .camera import OpenCVCamera
from .camera_adapters import SUPPORTED_MODELS, get_camera_adapter
from .capturer import ThermalCapturer, ThermalCapturerResult, ThermalCapturerTerminated
from .config import CapturerConfig
from .gradients import gradient_names


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Capture frames from a USB thermal camera and print range statistics"
    )

    parser.add_argument(
        "--model",
        default=SUPPORTED_MODELS[0],
        help=f"Camera model ({', '.join(SUPPORTED_MODELS)})"
    )

    parser.add_argument(
        "--device",
        type=int,
        default=0,
        help="Video device index"
    )

    parser.add_argument(
        "--frames",
        type=int,
        default=25,
        help="Number of frames to capture before stopping"
    )

    parser.add_argument(
        "--unit",
        default="C",
        help="Display unit: K, C or F"
    )

    parser.add_argument(
        "--manual",
        nargs=2,
        type=float,
        metavar=("LOW", "HIGH"),
        help="Fixed display range in --unit instead of auto range"
    )

    parser.add_argument(
        "--gradient",
        help="Color gradient name"
    )

    parser.add_argument(
        "--histogram",
        action="store_true",
        help="Print the histogram of the last frame"
    )

    parser.add_argument(
        "--list-gradients",
        action="store_true",
        help="List available gradients and exit"
    )

    parser.add_argument(
        "--list-models",
        action="store_true",
        help="List supported camera models and exit"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    return parser


def main(argv=None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_gradients:
        print("\n".join(gradient_names()))
        return 0
    if args.list_models:
        print("\n".join(SUPPORTED_MODELS))
        return 0

    try:
        config_values = {"default_unit": args.unit, "result_queue_size": 0}
        if args.gradient:
            config_values["default_gradient"] = args.gradient
        if args.manual:
            config_values["manual_range"] = args.manual
        config = CapturerConfig.from_dict(config_values)
        adapter = get_camera_adapter(args.model)

        settings = ThermalCapturer.default_settings(config)
        if args.manual:
            settings = settings.replace(auto_range=False)
        capturer = ThermalCapturer(OpenCVCamera(args.device), adapter, config=config, settings=settings)

        last = None
        with capturer:
            capturer.start()
            for result in capturer.results(timeout=10.0):
                print_result(result)
                last = result
                if result.frame_index + 1 >= args.frames:
                    break

        # Surface a failure reported while stopping
        item = capturer.poll_result()
        while item is not None:
            if isinstance(item, ThermalCapturerTerminated) and item.failed:
                raise item.error
            item = capturer.poll_result()

        if last is None:
            raise RuntimeError("No frames received from camera")
        if args.histogram:
            print_histogram(last)

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    return 0


def print_result(result: ThermalCapturerResult):
    """Print one line per captured frame, in the unit the capturer was configured with."""
    unit = result.unit
    print(
        f"#{result.frame_index:<5d} "
        f"display {result.image_range.format(unit)}  "
        f"captured {result.captured_range.format(unit)}  "
        f"{result.real_fps:6.1f} fps (camera {result.reported_fps:.1f})"
    )


def print_histogram(result: ThermalCapturerResult, width: int = 40):
    """Print the histogram of a result as text bars."""
    histogram = result.histogram
    unit = result.unit
    peak = histogram.max_count or 1

    print("\n=== TEMPERATURE HISTOGRAM ===")
    for bucket in histogram:
        if bucket.count == 0:
            continue
        bar = "#" * max(1, round(bucket.count / peak * width))
        print(f"{bucket.range.low.format(unit, 2):>10} {bucket.count:7d} {bar}")
    print(f"Total pixels: {histogram.total}")


if __name__ == "__main__":
    sys.exit(main())
