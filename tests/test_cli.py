"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from floatcheck.cli import app

runner = CliRunner()

SCHEDULE = """\
metadata:
  name: Demo
tasks:
  A: {name: Design, start: 0, finish: 1}
  B: {name: Build, start: 1, finish: 3, predecessors: [A]}
  C: {name: Test, start: 2.5, finish: 4, predecessors: [B]}
  D: {name: Docs, start: 0, finish: 2}
"""

CYCLIC = """\
tasks:
  A: {start: 0, finish: 1, predecessors: [B]}
  B: {start: 1, finish: 2, predecessors: [A]}
"""


@pytest.fixture
def schedule_file(tmp_path: Path) -> Path:
    path = tmp_path / "schedule.yaml"
    path.write_text(SCHEDULE)
    return path


@pytest.fixture
def cyclic_file(tmp_path: Path) -> Path:
    path = tmp_path / "cyclic.yaml"
    path.write_text(CYCLIC)
    return path


class TestAnalyzeCommand:
    """Test the analyze CLI command."""

    def test_text_output(self, schedule_file: Path) -> None:
        """The default report is a text table."""
        result = runner.invoke(app, ["analyze", str(schedule_file)])

        assert result.exit_code == 0
        assert "Schedule: Demo" in result.stdout
        assert "Project finish: 4 days" in result.stdout
        assert "Task 'C' violates its constraints by 0.5 days" in result.stdout

    def test_json_output(self, schedule_file: Path) -> None:
        """JSON output parses and carries per-task results."""
        result = runner.invoke(app, ["analyze", str(schedule_file), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        by_id = {t["task_id"]: t for t in data["tasks"]}
        assert by_id["A"]["is_critical"] is True
        assert by_id["C"]["violates_constraints"] is True
        assert by_id["D"]["total_float"] == 0.0
        assert by_id["D"]["is_critical"] is True

    def test_output_file(self, schedule_file: Path, tmp_path: Path) -> None:
        """Reports can be written to a file."""
        output = tmp_path / "report.yaml"

        result = runner.invoke(
            app, ["analyze", str(schedule_file), "--format", "yaml", "--output", str(output)]
        )

        assert result.exit_code == 0
        assert "Report written to" in result.stdout
        assert "task_id: A" in output.read_text()

    def test_cli_overrides_config(self, schedule_file: Path) -> None:
        """Command-line thresholds override the config file."""
        (schedule_file.parent / "floatcheck_config.yaml").write_text(
            "analysis:\n  float_threshold: 1\nreport:\n  format: json\n"
        )

        result = runner.invoke(app, ["analyze", str(schedule_file), "--threshold", "3"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["float_threshold"] == 3.0
        assert data["float_tolerance"] == 0.001

    def test_global_config_option(self, schedule_file: Path, tmp_path: Path) -> None:
        """--config points at an explicit config file."""
        config = tmp_path / "custom.yaml"
        config.write_text("report:\n  format: json\n")

        result = runner.invoke(app, ["--config", str(config), "analyze", str(schedule_file)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["metadata"] == {"schedule": "Demo"}

    def test_max_tasks(self, schedule_file: Path) -> None:
        """--max-tasks limits the rows shown."""
        result = runner.invoke(app, ["analyze", str(schedule_file), "--max-tasks", "2"])

        assert result.exit_code == 0
        assert "(showing 2 of 4 tasks)" in result.stdout

    def test_cycles_fail(self, cyclic_file: Path) -> None:
        """Circular dependencies abort the analysis with exit code 1."""
        result = runner.invoke(app, ["analyze", str(cyclic_file)])

        assert result.exit_code == 1
        assert "circular dependencies" in result.output
        assert "Cycle found:" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing schedule file is reported as an error."""
        result = runner.invoke(app, ["analyze", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_schedule(self, tmp_path: Path) -> None:
        """Validation errors are reported as errors."""
        path = tmp_path / "bad.yaml"
        path.write_text("tasks:\n  A: {start: 3, finish: 1}\n")

        result = runner.invoke(app, ["analyze", str(path)])

        assert result.exit_code == 1
        assert "finishes before it starts" in result.output

    def test_verbose_logs_violations(self, schedule_file: Path) -> None:
        """Verbosity 1 logs violations."""
        result = runner.invoke(app, ["-v", "1", "analyze", str(schedule_file)])

        assert result.exit_code == 0
        assert result.output.count("violates its constraints") >= 2


class TestTraceCommand:
    """Test the trace CLI command."""

    def test_backward_trace(self, schedule_file: Path) -> None:
        """A backward trace scopes to ancestors."""
        result = runner.invoke(app, ["trace", str(schedule_file), "B", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["selected_task_id"] == "B"
        assert data["scope"] == ["A", "B"]

    def test_forward_trace(self, schedule_file: Path) -> None:
        """A forward trace scopes to descendants."""
        result = runner.invoke(
            app, ["trace", str(schedule_file), "B", "--mode", "forward", "--format", "json"]
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["scope"] == ["B", "C"]

    def test_trace_through_cycle(self, cyclic_file: Path) -> None:
        """Traces run on cyclic schedules; cyclic tasks are undetermined."""
        result = runner.invoke(app, ["trace", str(cyclic_file), "A", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["cycles"]["has_cycles"] is True
        assert all(t["total_float"] is None for t in data["tasks"])

    def test_unknown_task(self, schedule_file: Path) -> None:
        """Tracing an unknown task fails."""
        result = runner.invoke(app, ["trace", str(schedule_file), "Z"])

        assert result.exit_code == 1
        assert "Unknown task: Z" in result.output


class TestCyclesCommand:
    """Test the cycles CLI command."""

    def test_no_cycles(self, schedule_file: Path) -> None:
        """An acyclic schedule passes."""
        result = runner.invoke(app, ["cycles", str(schedule_file)])

        assert result.exit_code == 0
        assert "No circular dependencies found" in result.stdout

    def test_cycles_reported(self, cyclic_file: Path) -> None:
        """Cycles are listed and the command fails."""
        result = runner.invoke(app, ["cycles", str(cyclic_file)])

        assert result.exit_code == 1
        assert "involving 2 task(s)" in result.stdout
        assert "Cycle found:" in result.stdout
