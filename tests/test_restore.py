"""
Tests for the restore retry loop and the restore use case.
"""

import pytest

from src.adapters.mock import MockDownloader, MockEnvironment, MockFileSystem, MockProcessRunner
from src.core.models.restore import BinarySource, LocatedBinary, RestoreRequest
from src.core.services.restore import (
    RETRY_DELAY_SECONDS,
    RestoreOrchestrator,
    build_restore_arguments,
)
from src.core.use_cases.restore import RestoreResult, run_restore

BINARY = LocatedBinary(location="/agent/nuget/tools/nuget.exe", source=BinarySource.TOOL_CACHE)


class FakeSleep:
    """Records requested pauses instead of sleeping."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _statistics(lines: list[str]) -> list[str]:
    return [line for line in lines if "buildStatisticValue" in line]


def _errors(lines: list[str]) -> list[str]:
    return [line for line in lines if "status='ERROR'" in line]


def _warnings(lines: list[str]) -> list[str]:
    return [line for line in lines if "status='WARNING'" in line]


# ── Argument building ───────────────────────────────────────────────


class TestBuildRestoreArguments:
    def test_bare_restore(self):
        assert build_restore_arguments(RestoreRequest()) == ["restore"]

    def test_solution_file(self):
        request = RestoreRequest(solution_file="App.sln")
        assert build_restore_arguments(request) == ["restore", "App.sln"]

    def test_solution_with_sources_in_order(self):
        request = RestoreRequest(
            solution_file="App.sln",
            sources=("https://a/index.json", "https://b/index.json"),
        )
        assert build_restore_arguments(request) == [
            "restore",
            "App.sln",
            "-Source",
            "https://a/index.json",
            "-Source",
            "https://b/index.json",
        ]

    def test_sources_without_solution_ignored(self):
        request = RestoreRequest(sources=("https://a/index.json",))
        assert build_restore_arguments(request) == ["restore"]

    def test_solution_path_with_spaces_stays_one_argument(self):
        request = RestoreRequest(solution_file="My Apps/App.sln")
        assert build_restore_arguments(request) == ["restore", "My Apps/App.sln"]


# ── Retry loop ──────────────────────────────────────────────────────


class TestRestoreOrchestrator:
    def _run(self, exit_codes, max_retries, build_log, **request_kwargs):
        runner = MockProcessRunner(exit_codes)
        sleep = FakeSleep()
        orchestrator = RestoreOrchestrator(runner=runner, build_log=build_log, sleep=sleep)
        request = RestoreRequest(max_retries=max_retries, **request_kwargs)
        outcome = orchestrator.run(BINARY, request)
        return outcome, runner, sleep

    def test_first_try_success(self, build_log, lines):
        outcome, runner, sleep = self._run([0], 5, build_log)
        assert outcome.succeeded
        assert outcome.attempts == 1
        assert runner.call_count == 1
        assert sleep.calls == []
        assert _statistics(lines) == [
            "##teamcity[buildStatisticValue key='NugetRestoreTries' value='1']"
        ]

    def test_success_on_third_attempt(self, build_log, lines):
        outcome, runner, sleep = self._run([1, 1, 0], 3, build_log)
        assert outcome.succeeded
        assert outcome.attempts == 3
        assert runner.call_count == 3
        assert sleep.calls == [RETRY_DELAY_SECONDS, RETRY_DELAY_SECONDS]
        assert _statistics(lines) == [
            "##teamcity[buildStatisticValue key='NugetRestoreTries' value='3']"
        ]
        assert _errors(lines) == []
        assert "Success!" in lines

    def test_exhausted(self, build_log, lines):
        outcome, runner, sleep = self._run([1], 2, build_log)
        assert not outcome.succeeded
        assert outcome.attempts == 2
        assert runner.call_count == 2
        assert sleep.calls == [RETRY_DELAY_SECONDS]
        assert _errors(lines) == [
            "##teamcity[message text='Could not restore nuget packages, try 2' status='ERROR']"
        ]
        assert _statistics(lines) == [
            "##teamcity[buildStatisticValue key='NugetRestoreTries' value='2']"
        ]
        assert "Success!" not in lines

    def test_single_attempt_never_sleeps(self, build_log, lines):
        outcome, runner, sleep = self._run([1], 1, build_log)
        assert not outcome.succeeded
        assert runner.call_count == 1
        assert sleep.calls == []
        assert _warnings(lines) == []

    @pytest.mark.parametrize("max_retries", [1, 2, 5, 10])
    def test_never_exceeds_ceiling(self, build_log, max_retries):
        outcome, runner, sleep = self._run([7], max_retries, build_log)
        assert runner.call_count == max_retries
        assert len(sleep.calls) == max_retries - 1
        assert outcome.attempts == max_retries

    def test_stops_at_first_success(self, build_log):
        outcome, runner, _ = self._run([1, 0, 1, 1], 10, build_log)
        assert outcome.attempts == 2
        assert runner.call_count == 2

    def test_warning_per_recoverable_failure(self, build_log, lines):
        self._run([1, 1, 0], 3, build_log)
        assert _warnings(lines) == [
            "##teamcity[message text='Could not restore nuget packages, try 1' status='WARNING']",
            "##teamcity[message text='Could not restore nuget packages, try 2' status='WARNING']",
        ]

    def test_launch_failure_is_retried(self, build_log):
        outcome, runner, _ = self._run([-1, 0], 3, build_log)
        assert outcome.succeeded
        assert outcome.attempts == 2

    def test_each_attempt_in_its_own_block(self, build_log, lines):
        self._run([1, 0], 2, build_log, solution_file="App.sln")
        assert lines[:4] == [
            "##teamcity[blockOpened name='Nuget restore, try 1']",
            "Restoring: 'App.sln'",
            "##teamcity[blockClosed name='Nuget restore, try 1']",
            "##teamcity[message text='Could not restore nuget packages, try 1' status='WARNING']",
        ]
        assert lines[4:7] == [
            "##teamcity[blockOpened name='Nuget restore, try 2']",
            "Restoring: 'App.sln'",
            "##teamcity[blockClosed name='Nuget restore, try 2']",
        ]

    def test_bare_restore_message(self, build_log, lines):
        self._run([0], 1, build_log)
        assert lines[1] == "Restoring"

    def test_runner_receives_executable_and_args(self, build_log):
        _, runner, _ = self._run([0], 1, build_log, solution_file="App.sln", sources=("s1",))
        assert runner.call_log == [
            ("/agent/nuget/tools/nuget.exe", ["restore", "App.sln", "-Source", "s1"])
        ]

    def test_path_binary_launches_file_in_directory(self, build_log):
        runner = MockProcessRunner([0])
        orchestrator = RestoreOrchestrator(runner=runner, build_log=build_log, sleep=FakeSleep())
        orchestrator.run(
            LocatedBinary(location="/opt/nuget", source=BinarySource.PATH),
            RestoreRequest(max_retries=1),
        )
        assert runner.call_log[0][0] == "/opt/nuget/nuget.exe"


# ── Use case ────────────────────────────────────────────────────────


class TestRunRestore:
    def _run(self, build_log, exit_codes=(0,), path="/opt/a", with_binary=True, max_retries=3):
        env = MockEnvironment({"PATH": path})
        fs = MockFileSystem()
        if with_binary:
            fs.add_file("/opt/a/nuget.exe", "MZ")
        runner = MockProcessRunner(exit_codes)
        downloader = MockDownloader(fs=fs, fail=True)
        result = run_restore(
            RestoreRequest(max_retries=max_retries),
            env=env,
            fs=fs,
            runner=runner,
            downloader=downloader,
            build_log=build_log,
            sleep=FakeSleep(),
        )
        return result, runner

    def test_success(self, build_log):
        result, runner = self._run(build_log)
        assert result.ok
        assert result.exit_code == 0
        assert result.binary.source == BinarySource.PATH
        assert runner.call_count == 1

    def test_exhausted(self, build_log):
        result, runner = self._run(build_log, exit_codes=(1,), max_retries=2)
        assert not result.ok
        assert result.exit_code == 1
        assert result.outcome.attempts == 2
        assert "2 attempts" in result.error

    def test_binary_not_found_launches_nothing(self, build_log, lines):
        result, runner = self._run(build_log, with_binary=False)
        assert result.exit_code == 1
        assert result.binary is None
        assert result.outcome is None
        assert runner.call_count == 0
        assert lines[-1] == "Could not find nuget.exe"

    def test_to_dict(self, build_log):
        result, _ = self._run(build_log, exit_codes=(1, 0))
        assert result.to_dict() == {
            "ok": True,
            "binary": {"executable": "/opt/a/nuget.exe", "source": "path"},
            "attempts": 2,
        }

    def test_to_dict_error(self):
        assert RestoreResult(error="nuget.exe not found").to_dict() == {
            "ok": False,
            "error": "nuget.exe not found",
        }
