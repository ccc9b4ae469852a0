"""
Tests for the command line, using the in-memory backend.
"""

import json
import logging

import pytest

from arraybench import cli


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(cli, "load_dotenv", lambda: None)


class TestSweepCommand:
    def test_default_seed(self, capsys):
        assert cli.main(["sweep", "--ceiling", "10"]) == cli.EXIT_OK
        assert capsys.readouterr().out.split() == ["1", "2", "3", "5", "8"]

    def test_zero_one_seed(self, capsys):
        assert cli.main(["sweep", "--ceiling", "10", "--seed", "0", "1"]) == cli.EXIT_OK
        assert capsys.readouterr().out.split() == ["0", "1", "1", "2", "3", "5", "8"]

    def test_bad_seed_is_config_error(self, capsys):
        assert cli.main(["sweep", "--seed", "0", "0"]) == cli.EXIT_CONFIG_ERROR
        assert "Configuration error" in capsys.readouterr().err


class TestRunCommand:
    def test_memory_run_prints_csv(self, capsys, tmp_path):
        code = cli.main([
            "run", "--backend", "memory", "--ceiling", "10", "--random-seed", "1",
            "--run-id", "r1", "--output", str(tmp_path),
        ])
        assert code == cli.EXIT_OK

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == "ObjectCount,SizeInBytes,InsertionTime,RetrievalTime(ms)"
        assert [line.split(",")[0] for line in lines[1:]] == ["1", "2", "3", "5", "8"]

        saved = json.loads((tmp_path / "r1" / "result.json").read_text(encoding="utf-8"))
        assert saved["status"] == "completed"
        assert (tmp_path / "r1" / "results.csv").exists()

    def test_aggregate_preset(self, capsys, tmp_path):
        code = cli.main([
            "run", "--preset", "aggregate", "--backend", "memory", "--ceiling", "5",
            "--repetitions", "2", "--run-id", "r2", "--output", str(tmp_path), "--chart",
        ])
        assert code == cli.EXIT_OK

        lines = capsys.readouterr().out.strip().splitlines()
        assert lines[0] == "ObjectCount,AvgSizeInBytes,RetrievalTime(ms)"
        assert len(lines) == 5
        assert (tmp_path / "r2" / "chart_sweep.png").exists()

    def test_aggregate_mode_without_preset(self, capsys, tmp_path):
        """--mode aggregate alone gets 35 documents per size in per-size collections."""
        code = cli.main([
            "run", "--mode", "aggregate", "--backend", "memory", "--ceiling", "3",
            "--run-id", "r5", "--output", str(tmp_path),
        ])
        assert code == cli.EXIT_OK

        saved = json.loads((tmp_path / "r5" / "result.json").read_text(encoding="utf-8"))
        assert saved["config"]["repetitions_per_size"] == 35
        assert saved["config"]["collection_per_size"] is True
        assert [row["documents"] for row in saved["rows"]] == [35, 35, 35]

    def test_aggregate_mode_explicit_repetitions(self, capsys, tmp_path):
        code = cli.main([
            "run", "--mode", "aggregate", "--backend", "memory", "--ceiling", "3",
            "--repetitions", "2", "--run-id", "r6", "--output", str(tmp_path),
        ])
        assert code == cli.EXIT_OK

        saved = json.loads((tmp_path / "r6" / "result.json").read_text(encoding="utf-8"))
        assert [row["documents"] for row in saved["rows"]] == [2, 2, 2]

    def test_no_save(self, capsys, tmp_path):
        code = cli.main([
            "run", "--backend", "memory", "--ceiling", "3", "--run-id", "r3",
            "--output", str(tmp_path), "--no-save",
        ])
        assert code == cli.EXIT_OK
        assert not (tmp_path / "r3").exists()

    def test_invalid_repetitions(self, capsys, tmp_path):
        code = cli.main([
            "run", "--backend", "memory", "--repetitions", "0", "--output", str(tmp_path),
        ])
        assert code == cli.EXIT_CONFIG_ERROR

    def test_failed_run_exits_nonzero(self, capsys, tmp_path, monkeypatch, failing_store):
        monkeypatch.setattr(
            "arraybench.storage.get_store", lambda backend, config: failing_store(fail_at=3)
        )
        code = cli.main([
            "run", "--backend", "memory", "--ceiling", "10", "--run-id", "r4",
            "--output", str(tmp_path),
        ])
        assert code == cli.EXIT_RUN_FAILED

        captured = capsys.readouterr()
        assert len(captured.out.strip().splitlines()) == 3
        assert "Run failed at N=3" in captured.err

        saved = json.loads((tmp_path / "r4" / "result.json").read_text(encoding="utf-8"))
        assert saved["status"] == "failed"
        assert len(saved["rows"]) == 2


class TestSavedRunCommands:
    def _run(self, tmp_path):
        cli.main([
            "run", "--backend", "memory", "--ceiling", "10", "--run-id", "saved",
            "--output", str(tmp_path),
        ])

    def test_status(self, capsys, tmp_path):
        self._run(tmp_path)
        capsys.readouterr()
        assert cli.main(["status", "--run-id", "saved", "--output", str(tmp_path)]) == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "Status: completed (5/5 sizes)" in out
        assert "Largest N: 8" in out

    def test_status_missing_run(self, capsys, tmp_path):
        assert cli.main(["status", "--run-id", "none", "--output", str(tmp_path)]) == cli.EXIT_RUN_FAILED
        assert "Run not found: none" in capsys.readouterr().err

    def test_chart(self, capsys, tmp_path):
        self._run(tmp_path)
        capsys.readouterr()
        assert cli.main(["chart", "--run-id", "saved", "--output", str(tmp_path)]) == cli.EXIT_OK
        assert (tmp_path / "saved" / "chart_sweep.png").exists()


class TestMisc:
    def test_presets(self, capsys):
        assert cli.main(["presets"]) == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "roundtrip:" in out
        assert "aggregate:" in out
        assert "reporting_mode = aggregate" in out

    def test_no_command(self, capsys):
        assert cli.main([]) == cli.EXIT_RUN_FAILED
