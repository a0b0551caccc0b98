"""
Input handlers answering questions asked by the ``input`` task.
"""

import logging
import sys
from typing import Optional, TextIO

from ..components.base import InputHandler, InputRequest
from ..validation import BuildError

logger = logging.getLogger(__name__)


class ConsoleInputHandler(InputHandler):
    """
    Reads answers from a text stream, prompting on an output stream.

    An empty answer selects the request's default. When choices are given the
    question is repeated until a valid answer is read; end of input is a
    build failure.
    """

    def __init__(self, input_stream: Optional[TextIO] = None, output_stream: Optional[TextIO] = None):
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stdout
        self.project = None

    def handle_input(self, request: InputRequest) -> None:
        prompt = self._format_prompt(request)
        while True:
            self.output_stream.write(prompt)
            self.output_stream.flush()
            line = self.input_stream.readline()
            if not line:
                raise BuildError(f"Failed to read input for: {request.prompt}")

            answer = line.rstrip("\r\n")
            if not answer and request.default is not None:
                answer = request.default
            if request.is_valid(answer):
                request.value = answer
                logger.debug(f"Input '{request.prompt}' answered with '{answer}'")
                return
            logger.debug(f"Rejected answer '{answer}' for '{request.prompt}'")

    @staticmethod
    def _format_prompt(request: InputRequest) -> str:
        prompt = request.prompt
        if request.choices:
            rendered = ", ".join(
                f"[{choice}]" if choice == request.default else choice for choice in request.choices
            )
            prompt += f" ({rendered})"
        elif request.default is not None:
            prompt += f" [{request.default}]"
        return prompt + " "


class NonInteractiveInputHandler(InputHandler):
    """Answers every request with its default; a request without one fails."""

    def __init__(self):
        self.project = None

    def handle_input(self, request: InputRequest) -> None:
        if request.default is None:
            raise BuildError(
                f"Input requested in non-interactive mode without a default value: {request.prompt}"
            )
        request.value = request.default
