#!/usr/bin/env python3
"""
Example script for thermal_capture

Shows a live false-color view and the temperature histogram of a USB thermal
camera with matplotlib. The capturer does all the work on its own thread; the
plot loop only picks up the latest result.

Usage:
    python example.py [device index]
"""

import sys

import matplotlib.pyplot as plt

from thermal_capture import (
    CapturerConfig,
    OpenCVCamera,
    TemperatureUnit,
    ThermalCapturer,
    ThermalCapturerTerminated,
    get_camera_adapter,
)

CONFIG = CapturerConfig(default_unit=TemperatureUnit.CELSIUS)


def latest_result(capturer):
    """Drain the result queue and keep only the newest frame."""
    latest = None
    item = capturer.poll_result()
    while item is not None:
        if isinstance(item, ThermalCapturerTerminated):
            raise RuntimeError(f"Capture ended: {item.reason} ({item.error})")
        latest = item
        item = capturer.poll_result()
    return latest


def main():
    """Live view until the window is closed."""
    device = int(sys.argv[1]) if len(sys.argv) > 1 else 0
    capturer = ThermalCapturer(OpenCVCamera(device), get_camera_adapter("P2 Pro"), config=CONFIG)

    fig, (ax_image, ax_hist) = plt.subplots(1, 2, figsize=(12, 5))
    image_artist = None

    with capturer:
        capturer.start()
        first = capturer.wait_result(timeout=10.0)
        if first is None or isinstance(first, ThermalCapturerTerminated):
            print(f"Error: no frames from camera {device}")
            return

        result = first
        while plt.fignum_exists(fig.number):
            result = latest_result(capturer) or result

            # Thermal image
            if image_artist is None:
                image_artist = ax_image.imshow(result.image)
                ax_image.set_xlabel("Width (pixels)")
                ax_image.set_ylabel("Height (pixels)")
            else:
                image_artist.set_data(result.image)
            ax_image.set_title(
                f"{result.image_range.format(result.unit)}  {result.real_fps:.1f} fps"
            )

            # Temperature histogram
            ax_hist.clear()
            lows = [result.unit.from_kelvin(b.range.low.kelvin) for b in result.histogram]
            width = (lows[1] - lows[0]) if len(lows) > 1 else 1.0
            ax_hist.bar(lows, result.histogram.counts, width=width or 1.0, align="edge", color="red", alpha=0.7)
            ax_hist.set_title("Temperature Distribution")
            ax_hist.set_xlabel(f"Temperature ({result.unit.suffix})")
            ax_hist.set_ylabel("Pixel Count")
            ax_hist.grid(True, alpha=0.3)

            plt.pause(0.03)


if __name__ == "__main__":
    main()
