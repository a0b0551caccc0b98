"""
Unit tests for the default and silent build loggers.

Tests severity filtering, banners, task prefixes, failure-chain collapsing
and elapsed-time formatting.
"""

import io

import pytest

from buildctl.engine import EchoTask, Project, Target
from buildctl.listeners import DefaultLogger, SilentLogger, format_time, throwable_message
from buildctl.models import BuildEvent, BuildEventType, MessageLevel
from buildctl.validation import BuildError


def make_logger(cls=DefaultLogger, level=MessageLevel.INFO, emacs=False):
    logger = cls()
    logger.set_message_output_level(level)
    logger.set_output_stream(io.StringIO())
    logger.set_error_stream(io.StringIO())
    logger.set_emacs_mode(emacs)
    return logger


@pytest.fixture
def project():
    project = Project()
    project.name = "demo"
    project.set_user_property("buildctl.file", "/work/build.toml")
    return project


def message_event(project, message, priority, task=None):
    return BuildEvent(BuildEventType.MESSAGE_LOGGED, project, task=task, message=message, priority=priority)


@pytest.mark.unit
class TestFormatTime:
    """Test cases for elapsed-time formatting."""

    @pytest.mark.parametrize(
        "seconds, expected",
        [
            (65.0, "1 minute 5.00 seconds"),
            (3.5, "3.5000 seconds"),
            (1.25, "1.2500 second"),
            (0.0, "0.0000 seconds"),
            (61.5, "1 minute 1.50 second"),
            (125.0, "2 minutes 5.00 seconds"),
            (3600.0, "60 minutes 0.00 seconds"),
            (119.999, "2 minutes 0.00 seconds"),
            (59.99999, "1 minute 0.00 seconds"),
            (1.99999, "2.0000 seconds"),
        ],
    )
    def test_format_time(self, seconds, expected):
        assert format_time(seconds) == expected


@pytest.mark.unit
class TestThrowableMessage:
    """Test cases for failure-chain rendering."""

    def test_redundant_wrapper_collapsed(self):
        error = BuildError("Build failed: disk full", cause=BuildError("disk full"))
        text = throwable_message(error, verbose=False)
        assert text.count("disk full") == 1
        assert text == "Build failed: disk full\n"

    def test_identical_wrapper_collapsed(self):
        error = BuildError("disk full", cause=OSError("disk full"))
        assert throwable_message(error, verbose=False) == "disk full\n"

    def test_unrelated_cause_not_collapsed(self):
        error = BuildError("Target failed", cause=OSError("disk full"))
        assert throwable_message(error, verbose=False) == "Target failed\n"

    def test_location_prefix(self):
        error = BuildError("bad task", location="build.toml:targets.main.tasks[0]")
        assert throwable_message(error, verbose=False) == "build.toml:targets.main.tasks[0] bad task\n"

    def test_verbose_prints_type_and_causes(self):
        try:
            try:
                raise OSError("disk full")
            except OSError as inner:
                raise BuildError("Copy failed", cause=inner, location="build.toml")
        except BuildError as outer:
            text = throwable_message(outer, verbose=True)

        assert text.startswith("build.toml\n[BuildError] Copy failed\n")
        assert "[Caused by OSError] disk full" in text

    def test_verbose_collapses_before_printing(self):
        error = BuildError("Build failed: disk full", cause=BuildError("disk full"))
        text = throwable_message(error, verbose=True)
        assert text.startswith("Build failed: [BuildError] disk full\n")
        assert "Caused by" not in text

    def test_plain_exception(self):
        assert throwable_message(ValueError("oops"), verbose=False) == "oops\n"


@pytest.mark.unit
class TestDefaultLogger:
    """Test cases for event rendering."""

    def test_build_started_prints_build_file(self, project):
        logger = make_logger()
        logger.build_started(BuildEvent(BuildEventType.BUILD_STARTED, project))
        assert logger.out.getvalue() == "Buildfile: /work/build.toml\n"

    def test_build_started_quiet(self, project):
        logger = make_logger(level=MessageLevel.WARN)
        logger.build_started(BuildEvent(BuildEventType.BUILD_STARTED, project))
        assert logger.out.getvalue() == ""

    def test_success_banner(self, project):
        logger = make_logger()
        logger.build_finished(BuildEvent(BuildEventType.BUILD_FINISHED, project))
        text = logger.out.getvalue()
        assert text.startswith("\nBUILD FINISHED\n\nTotal time: ")
        assert text.endswith(" seconds\n\n") or text.endswith(" second\n\n")
        assert logger.err.getvalue() == ""

    def test_failure_banner_on_error_stream(self, project):
        logger = make_logger()
        error = BuildError("Build failed: disk full", cause=BuildError("disk full"))
        logger.build_finished(BuildEvent(BuildEventType.BUILD_FINISHED, project, exception=error))

        text = logger.err.getvalue()
        assert text.startswith("\nBUILD FAILED\nBuild failed: disk full\n\nTotal time: ")
        assert text.count("disk full") == 1
        assert logger.out.getvalue() == ""

    def test_target_banner(self, project):
        logger = make_logger()
        target = Target(name="compile", description="Compile sources")
        logger.target_started(BuildEvent(BuildEventType.TARGET_STARTED, project, target=target))
        assert logger.out.getvalue() == "\ndemo > compile:\n\n"

    def test_target_banner_with_long_targets(self, project):
        project.set_user_property("buildctl.showlongtargets", "1")
        logger = make_logger()
        target = Target(name="compile", description="Compile sources")
        logger.target_started(BuildEvent(BuildEventType.TARGET_STARTED, project, target=target))
        assert logger.out.getvalue() == "\ndemo > compile [Compile sources]:\n\n"

    def test_target_banner_skipped_for_empty_name_and_quiet(self, project):
        logger = make_logger()
        logger.target_started(BuildEvent(BuildEventType.TARGET_STARTED, project, target=Target(name="")))
        quiet = make_logger(level=MessageLevel.WARN)
        quiet.target_started(BuildEvent(BuildEventType.TARGET_STARTED, project, target=Target(name="x")))
        assert logger.out.getvalue() == ""
        assert quiet.out.getvalue() == ""

    @pytest.mark.parametrize(
        "priority, shown",
        [
            (MessageLevel.ERROR, True),
            (MessageLevel.WARN, True),
            (MessageLevel.INFO, True),
            (MessageLevel.VERBOSE, False),
            (MessageLevel.DEBUG, False),
        ],
    )
    def test_message_filtering(self, project, priority, shown):
        logger = make_logger(level=MessageLevel.INFO)
        logger.message_logged(message_event(project, "hello", priority))
        written = logger.out.getvalue() + logger.err.getvalue()
        assert (written == "hello\n") is shown

    def test_error_messages_go_to_error_stream(self, project):
        logger = make_logger()
        logger.message_logged(message_event(project, "broken", MessageLevel.ERROR))
        logger.message_logged(message_event(project, "fine", MessageLevel.WARN))
        assert logger.err.getvalue() == "broken\n"
        assert logger.out.getvalue() == "fine\n"

    def test_task_prefix(self, project):
        logger = make_logger()
        logger.message_logged(message_event(project, "hi", MessageLevel.INFO, task=EchoTask("hi")))
        assert logger.out.getvalue() == "     [echo] hi\n"

    def test_emacs_mode_drops_prefix(self, project):
        logger = make_logger(emacs=True)
        logger.message_logged(message_event(project, "hi", MessageLevel.INFO, task=EchoTask("hi")))
        assert logger.out.getvalue() == "hi\n"


@pytest.mark.unit
class TestSilentLogger:
    """Test cases for the silent logger."""

    def test_success_prints_nothing(self, project):
        logger = make_logger(SilentLogger, level=MessageLevel.WARN)
        logger.build_started(BuildEvent(BuildEventType.BUILD_STARTED, project))
        logger.target_started(BuildEvent(BuildEventType.TARGET_STARTED, project, target=Target(name="x")))
        logger.build_finished(BuildEvent(BuildEventType.BUILD_FINISHED, project))
        assert logger.out.getvalue() == ""
        assert logger.err.getvalue() == ""

    def test_failure_is_reported(self, project):
        logger = make_logger(SilentLogger, level=MessageLevel.WARN)
        logger.build_started(BuildEvent(BuildEventType.BUILD_STARTED, project))
        logger.build_finished(
            BuildEvent(BuildEventType.BUILD_FINISHED, project, exception=BuildError("it broke"))
        )
        text = logger.err.getvalue()
        assert text.startswith("\nBUILD FAILED\nit broke\n\nTotal time: ")

    def test_task_output_still_shown_at_warn(self, project):
        logger = make_logger(SilentLogger, level=MessageLevel.WARN)
        logger.message_logged(message_event(project, "careful", MessageLevel.WARN))
        logger.message_logged(message_event(project, "chatty", MessageLevel.INFO))
        assert logger.out.getvalue() == "careful\n"
