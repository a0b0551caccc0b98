"""
Unit tests for the console and non-interactive input handlers.
"""

import io

import pytest

from buildctl.components import InputRequest
from buildctl.input import ConsoleInputHandler, NonInteractiveInputHandler
from buildctl.validation import BuildError


def console(answers):
    return ConsoleInputHandler(io.StringIO(answers), io.StringIO())


@pytest.mark.unit
class TestConsoleInputHandler:
    """Test cases for ConsoleInputHandler."""

    def test_reads_answer(self):
        handler = console("blue\n")
        request = InputRequest("Colour?")
        handler.handle_input(request)
        assert request.value == "blue"
        assert handler.output_stream.getvalue() == "Colour? "

    def test_empty_answer_uses_default(self):
        handler = console("\n")
        request = InputRequest("Mode?", default="fast")
        handler.handle_input(request)
        assert request.value == "fast"
        assert handler.output_stream.getvalue() == "Mode? [fast] "

    def test_repeats_until_valid_choice(self):
        handler = console("maybe\nyes\n")
        request = InputRequest("Continue?", default="no", choices=("yes", "no"))
        handler.handle_input(request)
        assert request.value == "yes"
        assert handler.output_stream.getvalue() == "Continue? (yes, [no]) " * 2

    def test_end_of_input_fails(self):
        with pytest.raises(BuildError, match="Failed to read input for: Name?"):
            console("").handle_input(InputRequest("Name?"))


@pytest.mark.unit
class TestNonInteractiveInputHandler:
    """Test cases for NonInteractiveInputHandler."""

    def test_uses_default(self):
        request = InputRequest("Mode?", default="fast")
        NonInteractiveInputHandler().handle_input(request)
        assert request.value == "fast"

    def test_fails_without_default(self):
        with pytest.raises(BuildError, match="non-interactive mode"):
            NonInteractiveInputHandler().handle_input(InputRequest("Mode?"))
