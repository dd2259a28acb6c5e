from __future__ import annotations

import time

from csiscope import cli
from csiscope.config.runtime import CsiScopeConfig
from csiscope.core.live_view import LiveView


def test_spawn_failure_exits_non_zero(capsys) -> None:
    status = cli.main(["--executable", "csiscope-no-such-tool-for-tests", "--port", "/dev/null"])

    assert status == 1
    assert "csiscope-no-such-tool-for-tests" in capsys.readouterr().err


def test_invalid_config_file_exits_non_zero(tmp_path, capsys) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("- not\n- a mapping\n", encoding="utf-8")

    assert cli.main(["--config", str(path)]) == 1
    assert "invalid configuration" in capsys.readouterr().err


def test_run_with_simulated_source_feeds_the_viewer() -> None:
    frames = []

    def _viewer(live_view: LiveView, *, frame_interval_ms: int, amplitude_max: float) -> None:
        assert frame_interval_ms == 16
        assert amplitude_max == 60.0
        deadline = time.time() + 5.0
        while time.time() < deadline:
            frame = live_view.on_tick()
            frames.append(frame)
            if frame.history_size >= 3:
                break
            time.sleep(0.01)

    cfg = CsiScopeConfig(simulate=True, simulate_interval_s=0.001, simulate_subcarriers=8)

    assert cli.run(cfg, viewer=_viewer) == 0
    last = frames[-1]
    assert last.history_size >= 3
    assert last.subcarriers == 8
    assert [f.tick for f in frames] == list(range(len(frames)))


def test_arguments_override_config() -> None:
    args = cli._build_arg_parser().parse_args(
        ["--port", "/dev/ttyACM1", "--arg=--baud", "--arg=115200", "--fps", "20",
         "--capacity", "7", "--policy", "abort_line", "--simulate"]
    )

    cfg = cli.config_from_args(args)

    assert cfg.port == "/dev/ttyACM1"
    assert cfg.extra_args == ("--baud", "115200")
    assert cfg.frame_interval_ms == 50
    assert cfg.history_capacity == 7
    assert cfg.decode_policy == "abort_line"
    assert cfg.simulate


def test_simulated_source_follows_a_custom_delimiter() -> None:
    frames = []

    def _viewer(live_view: LiveView, **_kwargs) -> None:
        deadline = time.time() + 5.0
        while time.time() < deadline:
            frame = live_view.on_tick()
            frames.append(frame)
            if frame.history_size >= 2:
                break
            time.sleep(0.01)

    cfg = CsiScopeConfig(
        simulate=True, simulate_interval_s=0.001, simulate_subcarriers=8, delimiter=";"
    )

    assert cli.run(cfg, viewer=_viewer) == 0
    assert frames[-1].history_size >= 2
    assert frames[-1].subcarriers == 8
