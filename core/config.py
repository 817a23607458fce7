from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union

import yaml

from schemas import Rect

from .errors import ConfigError

logger = logging.getLogger(__name__)


BACKGROUND_METHODS = ("mog2", "knn")


@dataclass(frozen=True)
class SourceConfig:
    camera_index: int = 0
    video_path: Optional[str] = None

    @property
    def use_camera(self) -> bool:
        return not self.video_path

    @property
    def target(self) -> Union[int, str]:
        """What cv2.VideoCapture should open."""
        return self.camera_index if self.use_camera else str(self.video_path)


@dataclass(frozen=True)
class PreprocessConfig:
    resize_factor: float = 1.0      # 0 < factor <= 1.0
    gaussian_kernel: int = 21       # normalized to odd by load_config()


@dataclass(frozen=True)
class BackgroundConfig:
    """
    Background estimator selection.

    method          : "mog2" (adaptive Gaussian mixture) or "knn"
    history         : frames that influence the model
    detect_shadows  : mark shadows as 127 instead of 255
    var_threshold   : MOG2 only
    dist2_threshold : KNN only
    warmup_frames   : first N applied frames are learned but reported empty;
                      None picks the variant default (mog2: 1, knn: its
                      sample count)
    """
    method: str = "mog2"
    history: int = 500
    detect_shadows: bool = True
    var_threshold: float = 16.0
    dist2_threshold: float = 400.0
    warmup_frames: Optional[int] = None


@dataclass(frozen=True)
class DetectionConfig:
    threshold: int = 25
    erode_iterations: int = 0
    dilate_iterations: int = 2
    min_area: float = 500.0
    roi: Optional[Rect] = None      # None => full frame
    background: BackgroundConfig = field(default_factory=BackgroundConfig)


@dataclass(frozen=True)
class ScheduleConfig:
    frame_skip: int = 0             # frames skipped between detections


@dataclass(frozen=True)
class OutputConfig:
    show_mask: bool = False
    headless: bool = False
    save_snapshots: bool = False
    snapshot_dir: str = "snapshots"
    event_log: Optional[str] = None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    log_file: Optional[str] = None
    stats_every_frames: int = 100


@dataclass(frozen=True)
class Config:
    source: SourceConfig = field(default_factory=SourceConfig)
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)




def normalize_kernel_size(kernel_size: int) -> int:
    """
    Gaussian blur needs an odd kernel. Even sizes are bumped by one.

    Done once at configuration time, never per frame.
    """
    k = int(kernel_size)
    if k < 1:
        raise ConfigError(f"Gaussian kernel size must be >= 1, got {kernel_size}")
    if k % 2 == 0:
        k += 1
    return k


def parse_roi(value: Any) -> Optional[Rect]:
    """
    Parse an ROI given as "x,y,w,h" or as a 4-element sequence.

    None / "" mean "full frame". Width and height must be positive.
    """
    if value is None or isinstance(value, Rect):
        return value

    if isinstance(value, str):
        if not value.strip():
            return None
        parts: Sequence[Any] = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = value
    else:
        raise ConfigError(f"Invalid ROI {value!r}. Expected x,y,width,height.")

    if len(parts) != 4:
        raise ConfigError(f"Invalid ROI {value!r}. Expected x,y,width,height.")

    try:
        x, y, w, h = (int(str(p).strip()) for p in parts)
    except ValueError:
        raise ConfigError(f"Invalid ROI {value!r}. Expected x,y,width,height.") from None

    if w <= 0 or h <= 0:
        raise ConfigError(
            f"Invalid ROI {value!r}. Width and height must be positive."
        )
    return Rect(x, y, w, h)


def _deep_merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Merge nested dicts; values from extra win. Inputs are not modified."""
    out = dict(base)
    for k, v in extra.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _section_from_dict(cls: Any, data: Any, section: str) -> Any:
    """
    Build a dataclass from a dict, keeping only known fields.
    Unknown keys in YAML are ignored (backwards-compatible).
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Config section '{section}' must be a mapping, got: {type(data).__name__}"
        )

    known = {f.name for f in fields(cls)}
    for k in data:
        if k not in known:
            logger.debug("Ignoring unknown config key %s.%s", section, k)
    return cls(**{k: v for k, v in data.items() if k in known})


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer, got {value!r}") from None


def _as_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None


def _build_config(raw: Dict[str, Any]) -> Config:
    detection_data = dict(raw.get("detection") or {})
    background_data = detection_data.pop("background", None)
    roi_value = detection_data.pop("roi", None)

    detection = _section_from_dict(DetectionConfig, detection_data, "detection")
    detection = replace(
        detection,
        roi=parse_roi(roi_value),
        background=_section_from_dict(BackgroundConfig, background_data, "detection.background"),
    )

    return Config(
        source=_section_from_dict(SourceConfig, raw.get("source"), "source"),
        preprocess=_section_from_dict(PreprocessConfig, raw.get("preprocess"), "preprocess"),
        detection=detection,
        schedule=_section_from_dict(ScheduleConfig, raw.get("schedule"), "schedule"),
        output=_section_from_dict(OutputConfig, raw.get("output"), "output"),
        logging=_section_from_dict(LoggingConfig, raw.get("logging"), "logging"),
    )


def validate_config(cfg: Config) -> Config:
    """
    Check ranges and normalize values. Returns a new Config.

    Raises ConfigError on the first problem found.
    """
    src = cfg.source
    video_path = src.video_path
    if video_path is not None and not str(video_path).strip():
        raise ConfigError("No video source provided. Use a camera index or a video path.")
    source = replace(
        src,
        camera_index=_as_int(src.camera_index, "source.camera_index"),
        video_path=str(video_path) if video_path is not None else None,
    )

    factor = _as_float(cfg.preprocess.resize_factor, "preprocess.resize_factor")
    if factor <= 0.0 or factor > 1.0:
        raise ConfigError(
            f"Invalid resize factor {factor}. Must be in (0, 1].",
            details={"resize_factor": factor},
        )
    preprocess = replace(
        cfg.preprocess,
        resize_factor=factor,
        gaussian_kernel=normalize_kernel_size(
            _as_int(cfg.preprocess.gaussian_kernel, "preprocess.gaussian_kernel")
        ),
    )

    det = cfg.detection
    threshold = _as_int(det.threshold, "detection.threshold")
    if not 0 <= threshold <= 255:
        raise ConfigError(f"Threshold must be within 0..255, got {threshold}")
    erode = _as_int(det.erode_iterations, "detection.erode_iterations")
    dilate = _as_int(det.dilate_iterations, "detection.dilate_iterations")
    if erode < 0 or dilate < 0:
        raise ConfigError("Erode/dilate iteration counts must be >= 0")
    min_area = _as_float(det.min_area, "detection.min_area")
    if min_area < 0:
        raise ConfigError(f"Minimum contour area must be >= 0, got {min_area}")

    bg = det.background
    method = str(bg.method).strip().lower()
    if method not in BACKGROUND_METHODS:
        raise ConfigError(
            f"Unsupported background subtractor: {bg.method}",
            details={"allowed": list(BACKGROUND_METHODS)},
        )
    history = _as_int(bg.history, "detection.background.history")
    warmup = None
    if bg.warmup_frames is not None:
        warmup = _as_int(bg.warmup_frames, "detection.background.warmup_frames")
    if history < 1 or (warmup is not None and warmup < 0):
        raise ConfigError("Background history must be >= 1 and warmup_frames >= 0")
    background = replace(
        bg,
        method=method,
        history=history,
        detect_shadows=bool(bg.detect_shadows),
        var_threshold=_as_float(bg.var_threshold, "detection.background.var_threshold"),
        dist2_threshold=_as_float(bg.dist2_threshold, "detection.background.dist2_threshold"),
        warmup_frames=warmup,
    )

    detection = replace(
        det,
        threshold=threshold,
        erode_iterations=erode,
        dilate_iterations=dilate,
        min_area=min_area,
        roi=parse_roi(det.roi),
        background=background,
    )

    # negative skip counts behave like "no skipping"
    schedule = replace(
        cfg.schedule,
        frame_skip=max(0, _as_int(cfg.schedule.frame_skip, "schedule.frame_skip")),
    )

    out = cfg.output
    output = replace(
        out,
        show_mask=bool(out.show_mask),
        headless=bool(out.headless),
        save_snapshots=bool(out.save_snapshots),
        snapshot_dir=str(out.snapshot_dir or "snapshots"),
        event_log=str(out.event_log) if out.event_log else None,
    )

    logging_cfg = replace(
        cfg.logging,
        level=str(cfg.logging.level).upper(),
        stats_every_frames=max(0, _as_int(cfg.logging.stats_every_frames, "logging.stats_every_frames")),
    )

    return Config(
        source=source,
        preprocess=preprocess,
        detection=detection,
        schedule=schedule,
        output=output,
        logging=logging_cfg,
    )


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Config:
    """
    Load YAML config, apply overrides and map it to our dataclasses.

    This function is the single source of truth for all configuration:
      - path=None           -> built-in defaults
      - path=<yaml file>    -> values from the file on top of the defaults
      - overrides           -> nested dict with the same shape as the YAML
                               (the CLI passes its flags this way)

    The returned Config is frozen and already validated.
    """
    raw: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            with path.open("r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a dict, got: {type(raw).__name__}")

    if overrides:
        raw = _deep_merge(raw, overrides)

    try:
        cfg = _build_config(raw)
    except TypeError as e:
        raise ConfigError(f"Invalid config structure: {e}") from e

    cfg = validate_config(cfg)

    logger.info(
        "Config loaded from %s | source=%s, resize=%.2f, skip=%d, bg=%s, "
        "threshold=%d, min_area=%.1f, roi=%s",
        path if path is not None else "<defaults>",
        cfg.source.target,
        cfg.preprocess.resize_factor,
        cfg.schedule.frame_skip,
        cfg.detection.background.method,
        cfg.detection.threshold,
        cfg.detection.min_area,
        cfg.detection.roi.as_tuple() if cfg.detection.roi else "full-frame",
    )

    return cfg
