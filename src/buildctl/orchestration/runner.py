"""
Top-level run function.

This module turns an argument vector into an ExitOutcome and is the single
place where outcomes are printed and mapped to process exit codes. The log
file, when one is used, is closed exactly once after the outcome is known.
"""

import logging
import traceback
from typing import Mapping, Optional, Sequence

from ..cli.actions import init_build_file, print_usage, print_version
from ..cli.arguments import parse_arguments
from ..cli.diagnostics import do_report
from ..models.config import BuildConfiguration, ImmediateAction, MessageLevel, ParsedInvocation
from ..models.outcome import ExitOutcome, OutcomeKind
from ..validation import BuildError, ConfigurationError, ErrorSeverity, ExitStatusError, handle_config_error
from .context import EngineContext
from .lifecycle import BuildLifecycle

logger = logging.getLogger(__name__)


def perform_immediate_action(invocation: ParsedInvocation, context: EngineContext) -> None:
    """
    Run a help, version, init or diagnostics request.

    Raises:
        ConfigurationError: If the sample build file cannot be written
    """
    streams = context.streams
    if invocation.action is ImmediateAction.HELP:
        print_usage(streams.err)
    elif invocation.action is ImmediateAction.VERSION:
        print_version(streams.out)
    elif invocation.action is ImmediateAction.INIT:
        init_build_file(invocation.action_argument, context.cwd)
    elif invocation.action is ImmediateAction.DIAGNOSTICS:
        do_report(streams.out, context.registry, context.system_properties, context.cwd)


def run_build(
    configuration: BuildConfiguration,
    context: EngineContext,
    additional_user_properties: Optional[Mapping[str, str]] = None,
) -> ExitOutcome:
    """
    Run one configured build and classify how it ended.

    Returns:
        The outcome. Only exceptions outside ``Exception``, such as
        KeyboardInterrupt, propagate.
    """
    try:
        if configuration.log_file is not None:
            context.streams.redirect_to_log_file(context.cwd / configuration.log_file)
        BuildLifecycle(configuration, context, additional_user_properties).run()
    except ExitStatusError as e:
        logger.debug(f"Build requested exit status {e.status}")
        return ExitOutcome.explicit_status(e.status, e)
    except ConfigurationError as e:
        handle_config_error(e, "build setup", severity=ErrorSeverity.DEBUG, reraise=False, logger=logger)
        return ExitOutcome.configuration_failure(e)
    except BuildError as e:
        logger.debug(f"Build failed: {e}")
        return ExitOutcome.build_failure(e)
    except Exception as e:
        logger.error(f"Unexpected failure during build: {e}", exc_info=True)
        return ExitOutcome.unexpected_failure(e)
    return ExitOutcome.success()


def run_invocation(
    args: Sequence[str],
    context: EngineContext,
    additional_user_properties: Optional[Mapping[str, str]] = None,
) -> ExitOutcome:
    """
    Parse ``args``, run the requested action or build, and report the outcome.

    Args:
        args: Command-line arguments without the program name
        context: Streams, registry and engine collaborators
        additional_user_properties: Properties merged over the -D values

    Returns:
        The outcome of the invocation
    """
    level = MessageLevel.INFO
    try:
        try:
            invocation = parse_arguments(args)
            if invocation.is_immediate:
                perform_immediate_action(invocation, context)
                outcome = ExitOutcome.success()
            else:
                level = invocation.configuration.message_level
                outcome = run_build(invocation.configuration, context, additional_user_properties)
        except ConfigurationError as e:
            outcome = ExitOutcome.configuration_failure(e)
        report_outcome(outcome, context, level)
    finally:
        context.streams.close()

    logger.debug(f"Invocation finished: {outcome.kind.value} ({outcome.exit_code})")
    return outcome


def report_outcome(outcome: ExitOutcome, context: EngineContext, level: MessageLevel) -> None:
    """
    Print a failure that has not been rendered yet.

    Build failures and explicit statuses were already rendered by the
    logger's BUILD FAILED banner and are not printed again.
    """
    err = context.streams.err
    error = outcome.error

    if outcome.kind is OutcomeKind.CONFIGURATION_FAILURE:
        if getattr(error, "show_usage", False):
            print_usage(err)
            err.write("\n")
        err.write(_render(error, level >= MessageLevel.VERBOSE))
    elif outcome.kind is OutcomeKind.UNEXPECTED_FAILURE:
        err.write(_render(error, True))
    err.flush()


def _render(error: BaseException, full: bool) -> str:
    if full:
        return "".join(traceback.format_exception(type(error), error, error.__traceback__))
    return f"{error}\n"


def start(
    args: Sequence[str],
    context: Optional[EngineContext] = None,
    additional_user_properties: Optional[Mapping[str, str]] = None,
) -> int:
    """
    Run an invocation and return its process exit code.

    Args:
        args: Command-line arguments without the program name
        context: Engine context; a default one is created when omitted
        additional_user_properties: Properties merged over the -D values
    """
    if context is None:
        context = EngineContext.create()
    return run_invocation(args, context, additional_user_properties).exit_code
