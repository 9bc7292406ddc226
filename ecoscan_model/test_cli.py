"""
Tests for the command-line interface.

Run with: pytest ecoscan_model/test_cli.py -v
"""

import json
import re

import pytest
from .cli import main
from .formatter import badge, colorize, signed_pct, supports_color, table


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "workload.json"
    path.write_text(json.dumps({
        "hardwareModel": "NVIDIA A100",
        "gpuCount": 4,
        "trainingHours": 100,
        "trainingRegion": "China (Coal)",
        "inferenceRegion": "China (Coal)",
        "monthlyRequests": 50000,
        "avgLatencySeconds": 1.0,
        "projectLifetimeYears": 2,
        "auditNotes": ["GPUs idle overnight"],
    }))
    return path


class TestAssessment:

    def test_default_profile(self, capsys):
        assert main(["--no-color"]) == 0
        out = capsys.readouterr().out
        assert "Lifecycle Assessment" in out
        assert "Available" in out

    def test_config_file(self, config_file, capsys):
        assert main([str(config_file), "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "4 x NVIDIA A100" in out
        assert "GPUs idle overnight" in out

    def test_apply_strategy(self, config_file, capsys):
        assert main([str(config_file), "--apply", "hardware", "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "Applied" in out
        assert "NVIDIA T4" in out

    def test_json_output(self, config_file, capsys):
        assert main([str(config_file), "--apply-all", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["current"]["gpuCount"] == 3
        assert data["baseline"]["gpuCount"] == 4
        assert {s["status"] for s in data["strategies"]} == {"applied"}
        assert data["carbonOffsetPercent"] > 0

    def test_missing_config(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "not found" in capsys.readouterr().err

    def test_invalid_json(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{ nope")
        assert main([str(path)]) == 1
        assert "Invalid JSON" in capsys.readouterr().err

    def test_unknown_strategy(self, config_file, capsys):
        assert main([str(config_file), "--apply", "wind_turbines"]) == 1
        assert "Unknown strategy" in capsys.readouterr().err

    def test_import_fallback(self, tmp_path, capsys):
        path = tmp_path / "charter.txt"
        path.write_text("Free-form project description")
        assert main(["--import", str(path), "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "16 x NVIDIA A100" in out
        assert "Defaulting to high-risk profile" in out

    def test_import_with_config_rejected(self, config_file):
        with pytest.raises(SystemExit):
            main([str(config_file), "--import", str(config_file)])


class TestReportAndHistory:

    def test_report_to_file(self, config_file, tmp_path, capsys):
        path = tmp_path / "report.json"
        assert main([str(config_file), "--report", str(path), "--requested-by", "Ops",
                     "--no-color"]) == 0
        report = json.loads(path.read_text())
        assert report["requestedBy"] == "Ops"
        assert report["metrics"]["grade"] == 'C'

    def test_report_to_directory(self, config_file, tmp_path, capsys):
        out_dir = tmp_path / "reports"
        out_dir.mkdir()
        assert main([str(config_file), "--report", str(out_dir), "--no-color"]) == 0
        files = list(out_dir.glob("EcoScan_Report_*.json"))
        assert len(files) == 1

    def test_save_and_list(self, config_file, tmp_path, capsys):
        history = tmp_path / "history.json"
        assert main([str(config_file), "--apply-all", "--history", str(history),
                     "--save", "--name", "Chatbot v2", "--no-color"]) == 0
        assert "Saved as Chatbot v2" in capsys.readouterr().err

        assert main(["--history", str(history), "--list-history", "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "Chatbot v2" in out
        assert "C -> " in out

    def test_rename(self, config_file, tmp_path, capsys):
        history = tmp_path / "history.json"
        main([str(config_file), "--history", str(history), "--save", "--no-color"])
        record_id = json.loads(history.read_text())[0]["id"]
        capsys.readouterr()

        assert main(["--history", str(history), "--rename", record_id, "Renamed",
                     "--no-color"]) == 0
        assert "Renamed" in capsys.readouterr().out
        assert main(["--history", str(history), "--rename", "missing", "x"]) == 1

    def test_empty_history(self, tmp_path, capsys):
        assert main(["--history", str(tmp_path / "h.json"), "--list-history"]) == 0
        assert "No saved assessments" in capsys.readouterr().out

    def test_history_required(self):
        with pytest.raises(SystemExit):
            main(["--list-history"])


class TestSweepCommand:

    def test_sweep(self, config_file, capsys):
        assert main([str(config_file), "--apply", "training_region",
                     "--sweep", "project_lifetime_years", "1", "4", "4", "--no-color"]) == 0
        out = capsys.readouterr().out
        assert "Sweep parameter: project_lifetime_years" in out

    def test_invalid_sweep_parameter(self, config_file, capsys):
        assert main([str(config_file), "--sweep", "hardware_model", "1", "2", "2",
                     "--no-color"]) == 1
        assert "Invalid sweep parameter" in capsys.readouterr().err


class TestFormatter:

    def test_table_alignment(self):
        text = table(["Name", "Value"], [("a", "1"), ("bb", "22")], aligns=['l', 'r'])
        lines = text.split("\n")
        assert len(lines) == 6
        assert lines[3] == "│ a    │     1 │"
        assert len({len(line) for line in lines}) == 1

    def test_short_rows_padded(self):
        text = table(["A", "B"], [("x",)])
        assert "│ x │   │" in text

    def test_colorize_only_adds_codes(self):
        text = "\n".join([
            table(["Grade", "Status"], [("A", "Applied"), ("E", "Available")]),
            badge("Carbon offset", signed_pct(-3.5)),
        ])
        colored = colorize(text)
        assert "\033[" in colored
        assert re.sub(r"\033\[\d+m", "", colored) == text

    def test_no_color_env(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert supports_color() is False


class TestHistoryFileErrors:

    @pytest.mark.parametrize("content", ["{not json", '{"a": 1}'])
    def test_list_bad_history(self, tmp_path, capsys, content):
        history = tmp_path / "history.json"
        history.write_text(content)
        assert main(["--history", str(history), "--list-history"]) == 1
        assert "Error:" in capsys.readouterr().err

    @pytest.mark.parametrize("content", ["{not json", '{"a": 1}'])
    def test_save_to_bad_history(self, config_file, tmp_path, capsys, content):
        history = tmp_path / "history.json"
        history.write_text(content)
        assert main([str(config_file), "--history", str(history), "--save",
                     "--no-color"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_clear_history(self, config_file, tmp_path, capsys):
        history = tmp_path / "history.json"
        main([str(config_file), "--history", str(history), "--save", "--no-color"])
        capsys.readouterr()
        assert main(["--history", str(history), "--clear-history", "--no-color"]) == 0
        assert "No saved assessments" in capsys.readouterr().out
        assert json.loads(history.read_text()) == []


class TestConfigParsing:

    def test_config_file_read_once(self, config_file, monkeypatch, capsys):
        from . import cli, config

        calls = []
        real_read_json = config.read_json

        def counting_read_json(path):
            calls.append(path)
            return real_read_json(path)

        monkeypatch.setattr(cli, "read_json", counting_read_json)
        monkeypatch.setattr(config, "read_json", counting_read_json)
        assert main([str(config_file), "--no-color"]) == 0
        assert len(calls) == 1
