from pathlib import Path

import sprout.exec as exec_util


class RecordingRunner:
    def __init__(self) -> None:
        self.requests: list[exec_util.CommandRequest] = []

    def run(self, request: exec_util.CommandRequest) -> exec_util.CommandResult:
        self.requests.append(request)
        return exec_util.CommandResult(argv=request.argv, returncode=0, stdout="ok", stderr="")


def test_run_with_runner_uses_given_runner() -> None:
    runner = RecordingRunner()

    result = exec_util.run_with_runner(
        exec_util.CommandRequest(argv=("git", "status")), runner=runner
    )

    assert result is not None
    assert result.stdout == "ok"
    assert runner.requests[0].argv == ("git", "status")


def test_try_run_command_missing_executable(tmp_path: Path) -> None:
    assert exec_util.try_run_command([str(tmp_path / "nope")]) is None


def test_try_run_command_captures_output(tmp_path: Path) -> None:
    result = exec_util.try_run_command(["sh", "-c", "pwd; echo err >&2; exit 5"], cwd=tmp_path)

    assert result is not None
    assert result.returncode == 5
    assert result.stdout.strip() == str(tmp_path)
    assert result.stderr.strip() == "err"


def test_timeout_reports_124() -> None:
    result = exec_util.run_with_runner(
        exec_util.CommandRequest(argv=("sleep", "5"), timeout_seconds=0.1)
    )

    assert result is not None
    assert result.timed_out
    assert result.returncode == 124


def test_run_streaming_returns_exit_code(tmp_path: Path) -> None:
    assert exec_util.run_streaming(["sh", "-c", "exit 2"], cwd=tmp_path) == 2
    assert exec_util.run_streaming([str(tmp_path / "nope")]) is None
