"""Configuration loading, overrides and validation."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from core.config import Config, load_config, normalize_kernel_size, parse_roi
from core.errors import ConfigError
from schemas import Rect


class TestDefaults:
    """Built-in defaults"""

    def test_builtin_defaults(self):
        cfg = load_config()
        assert isinstance(cfg, Config)
        assert cfg.source.camera_index == 0
        assert cfg.source.use_camera
        assert cfg.preprocess.resize_factor == 1.0
        assert cfg.preprocess.gaussian_kernel == 21
        assert cfg.detection.threshold == 25
        assert cfg.detection.erode_iterations == 0
        assert cfg.detection.dilate_iterations == 2
        assert cfg.detection.min_area == 500.0
        assert cfg.detection.roi is None
        assert cfg.detection.background.method == "mog2"
        assert cfg.schedule.frame_skip == 0
        assert cfg.output.snapshot_dir == "snapshots"
        assert cfg.output.event_log is None

    def test_config_is_frozen(self):
        cfg = load_config()
        with pytest.raises(FrozenInstanceError):
            cfg.detection.threshold = 10

    def test_shipped_default_yaml_loads(self):
        cfg = load_config(Path(__file__).resolve().parent.parent / "config" / "default.yaml")
        assert cfg.detection.background.method == "mog2"
        assert cfg.detection.roi is None


class TestYamlAndOverrides:
    """YAML file plus overrides"""

    def test_yaml_values_are_applied(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(
            "source:\n"
            "  video_path: clip.mp4\n"
            "detection:\n"
            "  threshold: 40\n"
            "  roi: [10, 20, 100, 50]\n"
            "  background:\n"
            "    method: KNN\n"
            "  unknown_key: 1\n"
            "schedule:\n"
            "  frame_skip: 3\n",
            encoding="utf-8",
        )
        cfg = load_config(path)
        assert cfg.source.target == "clip.mp4"
        assert not cfg.source.use_camera
        assert cfg.detection.threshold == 40
        assert cfg.detection.roi == Rect(10, 20, 100, 50)
        assert cfg.detection.background.method == "knn"
        assert cfg.schedule.frame_skip == 3

    def test_overrides_win_over_yaml(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("detection:\n  threshold: 40\n  min_area: 100\n", encoding="utf-8")
        cfg = load_config(path, {"detection": {"threshold": 60}})
        assert cfg.detection.threshold == 60
        assert cfg.detection.min_area == 100.0

    def test_missing_file_is_config_error(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_root_is_config_error(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_broken_yaml_is_config_error(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text("detection: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)


class TestValidation:
    """Range checks and normalization"""

    @pytest.mark.parametrize("factor", [0.0, -0.5, 1.5])
    def test_resize_factor_out_of_range(self, factor):
        with pytest.raises(ConfigError):
            load_config(None, {"preprocess": {"resize_factor": factor}})

    def test_resize_factor_one_is_valid(self):
        assert load_config(None, {"preprocess": {"resize_factor": 1}}).preprocess.resize_factor == 1.0

    def test_unsupported_background_method(self):
        with pytest.raises(ConfigError) as exc:
            load_config(None, {"detection": {"background": {"method": "gmg"}}})
        assert exc.value.error_code == "CONFIG_INVALID"
        assert exc.value.to_dict()["details"] == {"allowed": ["mog2", "knn"]}

    def test_even_kernel_is_made_odd_at_load(self):
        cfg = load_config(None, {"preprocess": {"gaussian_kernel": 20}})
        assert cfg.preprocess.gaussian_kernel == 21

    def test_negative_skip_clamped_to_zero(self):
        assert load_config(None, {"schedule": {"frame_skip": -4}}).schedule.frame_skip == 0

    def test_empty_video_path_is_missing_source(self):
        with pytest.raises(ConfigError):
            load_config(None, {"source": {"video_path": "  "}})

    @pytest.mark.parametrize("threshold", [-1, 256])
    def test_threshold_range(self, threshold):
        with pytest.raises(ConfigError):
            load_config(None, {"detection": {"threshold": threshold}})

    def test_negative_iterations_rejected(self):
        with pytest.raises(ConfigError):
            load_config(None, {"detection": {"erode_iterations": -1}})

    def test_warmup_left_to_estimator_by_default(self):
        assert load_config().detection.background.warmup_frames is None
        cfg = load_config(None, {"detection": {"background": {"method": "knn", "warmup_frames": "3"}}})
        assert cfg.detection.background.warmup_frames == 3

    def test_negative_warmup_rejected(self):
        with pytest.raises(ConfigError):
            load_config(None, {"detection": {"background": {"warmup_frames": -1}}})

    def test_non_numeric_value_rejected(self):
        with pytest.raises(ConfigError):
            load_config(None, {"detection": {"min_area": "lots"}})


class TestKernelNormalization:
    """normalize_kernel_size"""

    @pytest.mark.parametrize("k", range(1, 40))
    def test_odd_and_not_smaller(self, k):
        n = normalize_kernel_size(k)
        assert n % 2 == 1
        assert n >= k
        assert n - k <= 1

    def test_zero_rejected(self):
        with pytest.raises(ConfigError):
            normalize_kernel_size(0)


class TestRoiParsing:
    """parse_roi"""

    def test_string(self):
        assert parse_roi("1, 2,30,40") == Rect(1, 2, 30, 40)

    def test_sequence(self):
        assert parse_roi([5, 6, 7, 8]) == Rect(5, 6, 7, 8)

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_means_full_frame(self, value):
        assert parse_roi(value) is None

    @pytest.mark.parametrize("value", ["1,2,3", "a,b,c,d", "1,2,0,5", "1,2,5,-3", 42])
    def test_malformed(self, value):
        with pytest.raises(ConfigError):
            parse_roi(value)
