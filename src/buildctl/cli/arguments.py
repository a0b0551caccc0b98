"""
Command-line argument interpretation.

Parsing happens in three phases, and the order matters:

1. Immediate-exit flags (help, version, init, diagnostics) are looked for
   anywhere in the vector and short-circuit everything else.
2. Standalone toggles are removed wherever they appear, so they can never be
   taken as the value of a flag or as a target name.
3. The remaining tokens are scanned left to right. Valued flags consume the
   next remaining token; bare tokens are target names.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence

from ..config.settings import DEFAULT_BUILD_FILENAME, PropertyNames
from ..models.config import BuildConfiguration, ImmediateAction, MessageLevel, ParsedInvocation
from ..validation import ConfigurationError, validate_flag_value, validate_property_name

logger = logging.getLogger(__name__)

HELP_FLAGS = ("-help", "-h")
VERSION_FLAGS = ("-version", "-v")
INIT_FLAGS = ("-init", "-i")
DIAGNOSTICS_FLAGS = ("-diagnostics",)

QUIET_FLAGS = ("-quiet", "-q")
EMACS_FLAGS = ("-emacs", "-e")
VERBOSE_FLAGS = ("-verbose",)
DEBUG_FLAGS = ("-debug",)
SILENT_FLAGS = ("-silent", "-S")
PROPERTY_FILE_OVERRIDE_FLAGS = ("-propertyfileoverride",)

BUILDFILE_FLAGS = ("-buildfile", "-file", "-f")
KEEP_GOING_FLAGS = ("-keep-going", "-k")
PROJECT_HELP_FLAGS = ("-projecthelp", "-targets", "-list", "-l", "-p")

TOGGLE_FLAGS = frozenset(
    QUIET_FLAGS + EMACS_FLAGS + VERBOSE_FLAGS + DEBUG_FLAGS + SILENT_FLAGS + PROPERTY_FILE_OVERRIDE_FLAGS
)


def _find_immediate_action(args: Sequence[str]) -> Optional[ParsedInvocation]:
    if any(flag in args for flag in HELP_FLAGS):
        return ParsedInvocation(action=ImmediateAction.HELP)
    if any(flag in args for flag in VERSION_FLAGS):
        return ParsedInvocation(action=ImmediateAction.VERSION)
    for index, arg in enumerate(args):
        if arg in INIT_FLAGS:
            path = None
            if index + 1 < len(args) and not args[index + 1].startswith("-"):
                path = args[index + 1]
            return ParsedInvocation(action=ImmediateAction.INIT, action_argument=path)
    if any(flag in args for flag in DIAGNOSTICS_FLAGS):
        return ParsedInvocation(action=ImmediateAction.DIAGNOSTICS)
    return None


def _resolve_message_level(args: Sequence[str]) -> MessageLevel:
    level = MessageLevel.INFO
    if any(arg in QUIET_FLAGS for arg in args):
        level = MessageLevel.WARN
    if any(arg in VERBOSE_FLAGS for arg in args):
        level = MessageLevel.VERBOSE
    if any(arg in DEBUG_FLAGS for arg in args):
        level = MessageLevel.DEBUG
    return level


def parse_arguments(args: Sequence[str]) -> ParsedInvocation:
    """
    Interpret a raw argument vector.

    Args:
        args: Arguments without the program name

    Returns:
        Either an immediate action or a frozen BuildConfiguration

    Raises:
        ConfigurationError: On an unknown flag, a flag missing its value, or a
            repeated input handler
    """
    args = list(args)
    logger.debug(f"Parsing arguments: {args}")

    immediate = _find_immediate_action(args)
    if immediate is not None:
        logger.debug(f"Immediate action requested: {immediate.action.value}")
        return immediate

    message_level = _resolve_message_level(args)
    emacs_mode = any(arg in EMACS_FLAGS for arg in args)
    silent = any(arg in SILENT_FLAGS for arg in args)
    property_file_override = any(arg in PROPERTY_FILE_OVERRIDE_FLAGS for arg in args)
    remaining = [arg for arg in args if arg not in TOGGLE_FLAGS]

    build_file: Optional[Path] = None
    log_file: Optional[Path] = None
    search_for: Optional[str] = None
    logger_id: Optional[str] = None
    input_handler: Optional[str] = None
    strict = False
    keep_going = False
    show_long_targets = False
    project_help = False
    targets: List[str] = []
    listeners: List[str] = []
    property_files: List[Path] = []
    defined: Dict[str, str] = {}

    i = 0
    while i < len(remaining):
        arg = remaining[i]

        if arg == "-logfile":
            log_file = Path(validate_flag_value(
                remaining, i, "You must specify a log file when using the -logfile argument"))
            i += 1
        elif arg in BUILDFILE_FLAGS:
            build_file = Path(validate_flag_value(
                remaining, i, "You must specify a buildfile when using the -buildfile argument."))
            i += 1
        elif arg == "-listener":
            listeners.append(validate_flag_value(
                remaining, i, "You must specify a listener class when using the -listener argument"))
            i += 1
        elif arg.startswith("-D"):
            i = _parse_define(remaining, i, defined)
        elif arg == "-logger":
            logger_id = validate_flag_value(
                remaining, i, "You must specify a classname when using the -logger argument")
            i += 1
        elif arg == "-no-strict":
            strict = False
        elif arg == "-strict":
            strict = True
        elif arg == "-inputhandler":
            if input_handler is not None:
                raise ConfigurationError("Only one input handler class may be specified.")
            input_handler = validate_flag_value(
                remaining, i, "You must specify a classname when using the -inputhandler argument")
            i += 1
        elif arg == "-propertyfile":
            property_files.append(Path(validate_flag_value(
                remaining, i, "You must specify a filename when using the -propertyfile argument")))
            i += 1
        elif arg in KEEP_GOING_FLAGS:
            keep_going = True
        elif arg == "-longtargets":
            show_long_targets = True
            defined[PropertyNames.SHOW_LONG_TARGETS] = "1"
        elif arg in PROJECT_HELP_FLAGS:
            project_help = True
        elif arg == "-find":
            if i + 1 < len(remaining) and not remaining[i + 1].startswith("-"):
                search_for = remaining[i + 1]
                i += 1
            else:
                search_for = DEFAULT_BUILD_FILENAME
        elif arg.startswith("-"):
            raise ConfigurationError(f"Unknown argument: {arg}", show_usage=True)
        else:
            targets.append(arg)
        i += 1

    configuration = BuildConfiguration(
        build_file=build_file,
        targets=tuple(targets),
        listeners=tuple(listeners),
        logger=logger_id,
        input_handler=input_handler,
        message_level=message_level,
        emacs_mode=emacs_mode,
        silent=silent,
        keep_going=keep_going,
        strict=strict,
        show_long_targets=show_long_targets,
        project_help=project_help,
        property_files=tuple(property_files),
        property_file_override=property_file_override,
        defined_properties=MappingProxyType(defined),
        search_for=search_for,
        log_file=log_file,
    )
    logger.debug(f"Parsed configuration: {configuration}")
    return ParsedInvocation(configuration=configuration)


def _parse_define(args: List[str], index: int, defined: Dict[str, str]) -> int:
    """
    Parse one ``-D`` occurrence into ``defined``.

    Accepted forms are ``-Dname=value``, ``-Dname value``, ``-D name=value``
    and ``-D name value``. A token is only taken as the value when it does not
    start another ``-D``.

    Returns:
        Index of the last token consumed
    """
    arg = args[index]
    if arg == "-D" and index + 1 < len(args) and not args[index + 1].startswith("-"):
        index += 1
        name = args[index]
    else:
        name = arg[2:]

    if "=" in name:
        name, value = name.split("=", 1)
    elif index + 1 < len(args) and not args[index + 1].startswith("-D"):
        index += 1
        value = args[index]
    else:
        value = ""

    if not name:
        raise ConfigurationError("You must specify a property name when using the -D argument")
    validate_property_name(name, field_name="property name")
    defined[name] = value
    return index
