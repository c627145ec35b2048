"""End-to-end tests for the procsnitch entry point."""

import json
import sys

from conftest import FakeSampler
from procsnitch import run_snitch


def write_config(tmp_path, body):
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(body)
    return config_dir


def test_main_runs_every_execution(tmp_path, monkeypatch):
    monkeypatch.setattr(run_snitch, "build_sampler", lambda sampler_type, logger=None: FakeSampler(logger=logger))
    config_dir = write_config(tmp_path, (
        f"command: {sys.executable}\n"
        "arguments: ['-c', 'import time; time.sleep(30)']\n"
        "duration: 0.4s\n"
        "sampling: 0.1s\n"
        "executions: 2\n"
    ))
    output_dir = tmp_path / "out"

    code = run_snitch.main(["--config-dir", str(config_dir), "--output-dir", str(output_dir)])

    assert code == 0
    for idx in (1, 2):
        run_dir = output_dir / f"run_{idx}"
        session = json.loads((run_dir / "session.json").read_text())
        assert session["outcome"]["state"] == "killed"
        assert (run_dir / "series.csv").exists()
        assert (run_dir / "stdout.log").exists()
        assert len(list(run_dir.glob("*.png"))) == 5


def test_main_no_plot(tmp_path, monkeypatch):
    monkeypatch.setattr(run_snitch, "build_sampler", lambda sampler_type, logger=None: FakeSampler(logger=logger))
    config_dir = write_config(tmp_path, (
        f"command: {sys.executable}\n"
        "arguments: ['-c', 'pass']\n"
        "duration: 5s\n"
        "sampling: 0.1s\n"
    ))
    output_dir = tmp_path / "out"

    code = run_snitch.main(["--config-dir", str(config_dir), "--output-dir", str(output_dir), "--no-plot"])

    assert code == 0
    session = json.loads((output_dir / "run_1" / "session.json").read_text())
    assert session["outcome"]["state"] == "exited"
    assert session["outcome"]["returncode"] == 0
    assert not list((output_dir / "run_1").glob("*.png"))


def test_main_config_error(tmp_path):
    config_dir = write_config(tmp_path, "command: ls\nduration: 5s\nsampling: 1s\nsampler: Nope\n")
    assert run_snitch.main(["--config-dir", str(config_dir)]) == 2


def test_main_start_failure(tmp_path):
    config_dir = write_config(tmp_path, (
        "command: procsnitch-no-such-binary\n"
        "duration: 5s\n"
        "sampling: 1s\n"
    ))
    assert run_snitch.main(["--config-dir", str(config_dir), "--output-dir", str(tmp_path / "out")]) == 1
