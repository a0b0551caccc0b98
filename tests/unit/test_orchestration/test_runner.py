"""
Unit tests for the top-level run function.

Tests the mapping from how a run ended to its exit code, what is printed for
each outcome, log file handling and the immediate-exit actions.
"""

import pytest

from buildctl.components import BuildListener, ComponentKind
from buildctl.models import OutcomeKind
from buildctl.orchestration.runner import run_invocation, start
from buildctl.validation import BuildError


class ExplodingConfigurator:
    def configure_project(self, project, build_file):
        raise RuntimeError("unexpected kaboom")


class BrokenFinishListener(BuildListener):
    def build_started(self, event):
        pass

    def build_finished(self, event):
        raise RuntimeError("listener broke")

    def target_started(self, event):
        pass

    def target_finished(self, event):
        pass

    def task_started(self, event):
        pass

    def task_finished(self, event):
        pass

    def message_logged(self, event):
        pass


def fail_build(status=None, message="stop here"):
    task = {"fail": message}
    if status is not None:
        task["status"] = status
    return {
        "project": {"name": "p", "default": "main"},
        "targets": {"main": {"tasks": [task]}},
    }


@pytest.mark.unit
class TestExitCodes:
    """Test cases for outcome classification."""

    def test_success(self, engine_context, build_file):
        outcome = run_invocation([], engine_context)
        assert outcome.kind is OutcomeKind.SUCCESS
        assert outcome.exit_code == 0
        out = engine_context.streams.out.getvalue()
        assert "Buildfile: " in out
        assert "BUILD FINISHED" in out

    def test_configuration_failure(self, engine_context):
        outcome = run_invocation(["-buildfile", "missing.toml"], engine_context)
        assert outcome.kind is OutcomeKind.CONFIGURATION_FAILURE
        assert outcome.exit_code == 1
        assert "does not exist!" in engine_context.streams.err.getvalue()

    def test_build_failure(self, engine_context, make_build_file):
        make_build_file(fail_build())
        outcome = run_invocation([], engine_context)
        assert outcome.kind is OutcomeKind.BUILD_FAILURE
        assert outcome.exit_code == 1
        assert isinstance(outcome.error, BuildError)

    def test_build_failure_printed_once(self, engine_context, make_build_file):
        make_build_file(fail_build(message="unique failure text"))
        run_invocation([], engine_context)
        err = engine_context.streams.err.getvalue()
        assert "BUILD FAILED" in err
        assert err.count("unique failure text") == 1

    def test_explicit_status(self, engine_context, make_build_file):
        make_build_file(fail_build(status=3))
        outcome = run_invocation([], engine_context)
        assert outcome.kind is OutcomeKind.EXPLICIT_STATUS
        assert outcome.exit_code == 3

    def test_explicit_zero_status_is_success(self, engine_context, make_build_file):
        make_build_file(fail_build(status=0))
        outcome = run_invocation([], engine_context)
        assert outcome.kind is OutcomeKind.SUCCESS
        assert outcome.exit_code == 0

    def test_unexpected_failure_prints_traceback(self, engine_context, build_file):
        engine_context.configurator = ExplodingConfigurator()
        outcome = run_invocation([], engine_context)
        assert outcome.kind is OutcomeKind.UNEXPECTED_FAILURE
        assert outcome.exit_code == 1
        err = engine_context.streams.err.getvalue()
        assert "Traceback (most recent call last)" in err
        assert "RuntimeError: unexpected kaboom" in err

    def test_start_returns_exit_code(self, engine_context, make_build_file):
        make_build_file(fail_build(status=7))
        assert start([], engine_context) == 7

    def test_finish_listener_failure_printed_once(self, engine_context, build_file):
        engine_context.registry.register(ComponentKind.LISTENER, "broken", BrokenFinishListener)

        outcome = run_invocation(["-listener", "broken"], engine_context)

        assert outcome.kind is OutcomeKind.BUILD_FAILURE
        assert outcome.exit_code == 1
        assert engine_context.streams.err.getvalue().count("RuntimeError: listener broke") == 1

    def test_finish_listener_failure_after_build_failure(self, engine_context, make_build_file):
        make_build_file(fail_build(message="boom"))
        engine_context.registry.register(ComponentKind.LISTENER, "broken", BrokenFinishListener)

        outcome = run_invocation(["-listener", "broken"], engine_context)

        err = engine_context.streams.err.getvalue()
        assert outcome.kind is OutcomeKind.BUILD_FAILURE
        assert str(outcome.error) == "boom"
        assert err.count("RuntimeError: listener broke") == 1
        assert err.count("BuildError: boom") == 1


@pytest.mark.unit
class TestConfigurationReporting:
    """Test cases for how configuration failures are printed."""

    def test_unknown_argument_shows_usage(self, engine_context):
        outcome = run_invocation(["-bogus"], engine_context)
        err = engine_context.streams.err.getvalue()
        assert outcome.kind is OutcomeKind.CONFIGURATION_FAILURE
        assert err.startswith("buildctl [options] [target [target2 [target3] ...]]")
        assert err.endswith("Unknown argument: -bogus\n")

    def test_missing_value_has_no_usage(self, engine_context, tmp_path):
        outcome = run_invocation(["-buildfile"], engine_context)
        err = engine_context.streams.err.getvalue()
        assert outcome.kind is OutcomeKind.CONFIGURATION_FAILURE
        assert err == "You must specify a buildfile when using the -buildfile argument.\n"
        assert list(tmp_path.iterdir()) == []

    def test_verbose_prints_traceback(self, engine_context):
        run_invocation(["-verbose", "-buildfile", "missing.toml"], engine_context)
        err = engine_context.streams.err.getvalue()
        assert "Traceback (most recent call last)" in err
        assert "ConfigurationError" in err

    def test_no_events_on_configuration_failure(self, engine_context, build_file, recording_listener):
        from buildctl.components import ComponentKind

        engine_context.registry.register(ComponentKind.LISTENER, "recorder", lambda: recording_listener)
        run_invocation(["-listener", "recorder", "-logger", "nonexistent"], engine_context)
        assert recording_listener.events == []
        assert "Unable to instantiate specified logger class nonexistent" in engine_context.streams.err.getvalue()


@pytest.mark.unit
class TestLogFile:
    """Test cases for -logfile."""

    def test_output_written_to_log_file(self, engine_context, build_file, tmp_path):
        outcome = run_invocation(["-logfile", "build.log"], engine_context)

        assert outcome.is_success
        text = (tmp_path / "build.log").read_text(encoding="utf-8")
        assert "Building into dist" in text
        assert "BUILD FINISHED" in text
        assert engine_context.streams.closed is True
        assert engine_context.streams.out.closed

    def test_failure_reported_in_log_file(self, engine_context, make_build_file, tmp_path):
        make_build_file(fail_build(message="logged failure"))
        run_invocation(["-logfile", "build.log"], engine_context)
        text = (tmp_path / "build.log").read_text(encoding="utf-8")
        assert "BUILD FAILED" in text
        assert "logged failure" in text

    def test_unwritable_log_file(self, engine_context, build_file):
        outcome = run_invocation(["-logfile", "no/such/dir/build.log"], engine_context)
        assert outcome.kind is OutcomeKind.CONFIGURATION_FAILURE
        assert "Cannot write on the specified log file" in engine_context.streams.err.getvalue()


@pytest.mark.unit
class TestImmediateActions:
    """Test cases for help, version, init and diagnostics."""

    def test_help_goes_to_error_stream(self, engine_context):
        outcome = run_invocation(["-h"], engine_context)
        assert outcome.is_success
        assert "Options:" in engine_context.streams.err.getvalue()
        assert engine_context.streams.out.getvalue() == ""

    def test_version(self, engine_context):
        assert run_invocation(["target", "-version"], engine_context).is_success
        assert engine_context.streams.out.getvalue() == "buildctl 1.0.0\n"

    def test_init_writes_sample(self, engine_context, tmp_path):
        outcome = run_invocation(["-init"], engine_context)
        assert outcome.is_success
        assert (tmp_path / "build.toml").is_file()

    def test_init_refuses_existing_file(self, engine_context, build_file):
        before = build_file.read_text()
        outcome = run_invocation(["-init"], engine_context)
        assert outcome.kind is OutcomeKind.CONFIGURATION_FAILURE
        assert "Buildfile already exists." in engine_context.streams.err.getvalue()
        assert build_file.read_text() == before

    def test_diagnostics(self, engine_context):
        assert run_invocation(["-diagnostics"], engine_context).is_success
        assert "buildctl diagnostics" in engine_context.streams.out.getvalue().lower()
