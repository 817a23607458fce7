"""Command line parsing and exit codes."""

import pytest

import core.cli as cli
from core.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_RUNTIME_ERROR,
    attach_option_values,
    build_arg_parser,
    main,
    overrides_from_args,
    parse_args,
)
from schemas import Rect


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch, tmp_path):
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **kw: None)
    # no config/default.yaml unless a test writes one
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def captured_run(monkeypatch):
    seen = []
    monkeypatch.setattr(cli, "run", lambda cfg: seen.append(cfg))
    return seen


def overrides(*argv):
    return overrides_from_args(parse_args(list(argv)))


class TestOverrides:
    def test_no_flags_no_overrides(self):
        assert overrides() == {}

    def test_detection_flags(self):
        o = overrides("--threshold", "30", "--erode", "1", "--dilate", "3", "--min-area", "250", "--bg", "knn")
        assert o == {
            "detection": {
                "threshold": 30,
                "erode_iterations": 1,
                "dilate_iterations": 3,
                "min_area": 250.0,
                "background": {"method": "knn"},
            }
        }

    def test_source_flags(self):
        assert overrides("--video", "clip.mp4")["source"] == {"video_path": "clip.mp4"}
        assert overrides("--camera", "2")["source"] == {"camera_index": 2, "video_path": None}

    def test_camera_and_video_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_arg_parser().parse_args(["--camera", "0", "--video", "x.mp4"])

    def test_save_snapshots_without_directory(self):
        assert overrides("--save-snapshots")["output"] == {"save_snapshots": True}

    def test_save_snapshots_with_directory(self):
        assert overrides("--save-snapshots", "evidence")["output"] == {
            "save_snapshots": True,
            "snapshot_dir": "evidence",
        }

    def test_output_and_logging_flags(self):
        o = overrides("--show-mask", "--headless", "--log", "events.txt", "--log-level", "DEBUG")
        assert o["output"] == {"show_mask": True, "headless": True, "event_log": "events.txt"}
        assert o["logging"] == {"level": "DEBUG"}


class TestMain:
    def test_valid_run_returns_zero(self, captured_run):
        assert main(["--video", "clip.mp4", "--skip", "2", "--roi", "10,10,50,50", "--headless"]) == EXIT_OK
        cfg = captured_run[0]
        assert cfg.source.target == "clip.mp4"
        assert cfg.schedule.frame_skip == 2
        assert cfg.detection.roi.as_tuple() == (10, 10, 50, 50)

    def test_even_blur_kernel_is_corrected(self, captured_run):
        assert main(["--blur", "20", "--headless"]) == EXIT_OK
        assert captured_run[0].preprocess.gaussian_kernel == 21

    @pytest.mark.parametrize(
        "argv",
        [
            ["--resize", "0"],
            ["--resize", "1.5"],
            ["--roi", "1,2,3"],
            ["--threshold", "300"],
        ],
    )
    def test_config_errors_exit_two(self, argv, captured_run, capsys):
        assert main(argv) == EXIT_CONFIG_ERROR
        assert captured_run == []
        assert "motionwatch:" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, captured_run):
        assert main(["--config", str(tmp_path / "none.yaml")]) == EXIT_CONFIG_ERROR

    def test_unopenable_video_exits_one(self, tmp_path):
        assert main(["--video", str(tmp_path / "missing.mp4"), "--headless"]) == EXIT_RUNTIME_ERROR

    def test_snapshot_directory_failure_exits_one(self, tmp_path, monkeypatch):
        from core.errors import SnapshotDirectoryError

        def failing_run(cfg):
            raise SnapshotDirectoryError(cfg.output.snapshot_dir, "read-only")

        monkeypatch.setattr(cli, "run", failing_run)
        assert main(["--save-snapshots", str(tmp_path), "--headless"]) == EXIT_RUNTIME_ERROR


class TestNegativeRoi:
    def test_value_is_attached_to_flag(self):
        assert attach_option_values(["--roi", "-10,0,100,100", "--headless"]) == [
            "--roi=-10,0,100,100",
            "--headless",
        ]

    def test_trailing_flag_left_alone(self):
        assert attach_option_values(["--roi"]) == ["--roi"]

    def test_negative_origin_reaches_config(self, captured_run):
        assert main(["--roi", "-10,0,100,100", "--headless"]) == EXIT_OK
        assert captured_run[0].detection.roi == Rect(-10, 0, 100, 100)

    def test_equals_form_still_works(self, captured_run):
        assert main(["--roi=-10,-5,50,50", "--headless"]) == EXIT_OK
        assert captured_run[0].detection.roi == Rect(-10, -5, 50, 50)


class TestDefaultConfigFile:
    def write_default(self, tmp_path, text):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "default.yaml").write_text(text, encoding="utf-8")

    def test_builtin_defaults_without_file(self, captured_run):
        assert main(["--headless"]) == EXIT_OK
        assert captured_run[0].detection.threshold == 25

    def test_default_file_is_loaded(self, tmp_path, captured_run):
        self.write_default(tmp_path, "detection:\n  threshold: 40\n")
        assert main(["--headless"]) == EXIT_OK
        assert captured_run[0].detection.threshold == 40

    def test_flags_override_default_file(self, tmp_path, captured_run):
        self.write_default(tmp_path, "detection:\n  threshold: 40\n")
        assert main(["--threshold", "10", "--headless"]) == EXIT_OK
        assert captured_run[0].detection.threshold == 10

    def test_explicit_config_wins(self, tmp_path, captured_run):
        self.write_default(tmp_path, "detection:\n  threshold: 40\n")
        other = tmp_path / "other.yaml"
        other.write_text("detection:\n  threshold: 70\n", encoding="utf-8")
        assert main(["--config", str(other), "--headless"]) == EXIT_OK
        assert captured_run[0].detection.threshold == 70
