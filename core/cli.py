"""
core/cli.py

Command line entry point.

    motionwatch --camera 0 --show-mask
    motionwatch --video clip.mp4 --resize 0.5 --skip 2 --roi 100,50,400,300 \\
        --save-snapshots evidence --log events.txt --headless

Flags override values from --config (YAML), which override the
built-in defaults. Without --config, config/default.yaml is used when it
exists in the working directory.

An ROI with a negative origin can be given as "--roi -10,0,100,100";
the value is attached to the flag before argparse sees it.

Exit codes:
    0  end of stream, user exit (ESC / q) or Ctrl-C
    1  video source or snapshot directory could not be opened
    2  invalid arguments / configuration (pipeline never started)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import BACKGROUND_METHODS, load_config
from .errors import ConfigError, SnapshotDirectoryError, SourceOpenError
from .logging_setup import setup_logging
from .main_loop import run

EXIT_OK = 0
EXIT_RUNTIME_ERROR = 1
EXIT_CONFIG_ERROR = 2

DEFAULT_CONFIG_PATH = Path("config") / "default.yaml"

# options whose values may start with "-"
VALUE_OPTIONS = ("--roi",)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motionwatch",
        description="Background-subtraction motion detection for cameras and video files",
    )

    parser.add_argument("--config", type=str, default=None, help="YAML config file (default: config/default.yaml when present)")

    src = parser.add_mutually_exclusive_group()
    src.add_argument("--camera", type=int, default=None, metavar="INDEX",
                     help="Use camera with given index (default 0)")
    src.add_argument("--video", type=str, default=None, metavar="PATH",
                     help="Use a video file instead of a camera")

    parser.add_argument("--resize", type=float, default=None, metavar="FACTOR",
                        help="Resize frames by factor (0 < factor <= 1)")
    parser.add_argument("--skip", type=int, default=None, metavar="COUNT",
                        help="Number of frames to skip between detections")
    parser.add_argument("--blur", type=int, default=None, metavar="KERNEL",
                        help="Gaussian blur kernel size (made odd if even)")
    parser.add_argument("--threshold", type=int, default=None, metavar="VALUE",
                        help="Binary threshold value (default 25)")
    parser.add_argument("--erode", type=int, default=None, metavar="N",
                        help="Erosion iterations (default 0)")
    parser.add_argument("--dilate", type=int, default=None, metavar="N",
                        help="Dilation iterations (default 2)")
    parser.add_argument("--min-area", type=float, default=None, metavar="PIXELS",
                        help="Minimum contour area to treat as motion")
    parser.add_argument("--bg", type=str, default=None, choices=BACKGROUND_METHODS,
                        help="Background subtractor implementation")
    parser.add_argument("--roi", type=str, default=None, metavar="x,y,w,h",
                        help="Region of interest for motion detection (origin may be negative)")

    parser.add_argument("--show-mask", action="store_true", default=None,
                        help="Display the foreground mask window")
    parser.add_argument("--headless", action="store_true", default=None,
                        help="Do not open any window")
    parser.add_argument("--save-snapshots", nargs="?", const=True, default=None, metavar="DIR",
                        help="Save frames when motion is detected (default folder 'snapshots')")
    parser.add_argument("--log", type=str, default=None, metavar="FILE",
                        help="Log detection events to a text file")

    parser.add_argument("--log-level", type=str, default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Diagnostic logging level")
    parser.add_argument("--debug-log", type=str, default=None, metavar="FILE",
                        help="Also write diagnostic logging to this file")
    return parser


def attach_option_values(argv: Sequence[str]) -> List[str]:
    """Rewrite "--roi -10,0,100,100" as "--roi=-10,0,100,100"."""
    out: List[str] = []
    it = iter(argv)
    for arg in it:
        if arg in VALUE_OPTIONS:
            value = next(it, None)
            out.append(arg if value is None else f"{arg}={value}")
        else:
            out.append(arg)
    return out


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    argv = sys.argv[1:] if argv is None else argv
    return build_arg_parser().parse_args(attach_option_values(argv))


def overrides_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """Nested override dict (same shape as the YAML) for flags actually given."""
    o: Dict[str, Dict[str, Any]] = {
        "source": {},
        "preprocess": {},
        "detection": {},
        "schedule": {},
        "output": {},
        "logging": {},
    }

    if args.camera is not None:
        o["source"]["camera_index"] = args.camera
        o["source"]["video_path"] = None
    if args.video is not None:
        o["source"]["video_path"] = args.video

    if args.resize is not None:
        o["preprocess"]["resize_factor"] = args.resize
    if args.blur is not None:
        o["preprocess"]["gaussian_kernel"] = args.blur

    if args.threshold is not None:
        o["detection"]["threshold"] = args.threshold
    if args.erode is not None:
        o["detection"]["erode_iterations"] = args.erode
    if args.dilate is not None:
        o["detection"]["dilate_iterations"] = args.dilate
    if args.min_area is not None:
        o["detection"]["min_area"] = args.min_area
    if args.roi is not None:
        o["detection"]["roi"] = args.roi
    if args.bg is not None:
        o["detection"]["background"] = {"method": args.bg}

    if args.skip is not None:
        o["schedule"]["frame_skip"] = args.skip

    if args.show_mask:
        o["output"]["show_mask"] = True
    if args.headless:
        o["output"]["headless"] = True
    if args.save_snapshots is not None:
        o["output"]["save_snapshots"] = True
        if isinstance(args.save_snapshots, str):
            o["output"]["snapshot_dir"] = args.save_snapshots
    if args.log is not None:
        o["output"]["event_log"] = args.log

    if args.log_level is not None:
        o["logging"]["level"] = args.log_level
    if args.debug_log is not None:
        o["logging"]["log_file"] = args.debug_log

    return {k: v for k, v in o.items() if v}


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    setup_logging(args.log_level or logging.INFO)
    log = logging.getLogger("motionwatch.cli")

    config_path = args.config
    if config_path is None and DEFAULT_CONFIG_PATH.is_file():
        config_path = DEFAULT_CONFIG_PATH

    try:
        cfg = load_config(config_path, overrides_from_args(args))
    except ConfigError as e:
        print(f"motionwatch: {e.message}", file=sys.stderr)
        log.debug("%s", e.to_dict())
        return EXIT_CONFIG_ERROR

    setup_logging(cfg.logging.level, cfg.logging.log_file)

    try:
        run(cfg)
    except (SourceOpenError, SnapshotDirectoryError) as e:
        log.error("%s", e.message)
        log.debug("%s", e.to_dict())
        return EXIT_RUNTIME_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
