"""
Immediate-exit actions: usage, version and the sample build file.
"""

import logging
from pathlib import Path
from typing import Optional, TextIO

from ..config.settings import DEFAULT_BUILD_CONTENT, DEFAULT_BUILD_FILENAME, get_engine_version
from ..validation import ConfigurationError

logger = logging.getLogger(__name__)

USAGE = """\
buildctl [options] [target [target2 [target3] ...]]
Options:
  -h -help               print this message
  -l -list               list available targets in this project
  -i -init [file]        generates an initial buildfile
  -v -version            print the version information and exit
  -q -quiet              be extra quiet
  -S -silent             print nothing but task outputs and build failures
  -verbose               be extra verbose
  -debug                 print debugging information
  -emacs, -e             produce logging information without adornments
  -diagnostics           print diagnostics information
  -strict                runs build in strict mode, considering a warning as error
  -no-strict             runs build normally (overrides buildfile attribute)
  -longtargets           show target descriptions during build
  -logfile <file>        use given file for log
  -logger <name>         the logger which is to perform logging
  -listener <name>       add an instance of the named listener to the project
  -f -buildfile <file>   use given buildfile
  -D<property>=<value>   use value for given property
  -keep-going, -k        execute all targets that do not depend
                         on failed target(s)
  -propertyfile <file>   load all properties from file
  -propertyfileoverride  values in property file override existing values
  -find <file>           search for buildfile towards the root of the
                         filesystem and use it
  -inputhandler <name>   the input handler to use to handle user input

Components are named by a registered identifier or a dotted path
such as package.module.ClassName.
"""


def print_usage(stream: TextIO) -> None:
    stream.write(USAGE)


def print_version(stream: TextIO) -> None:
    stream.write(get_engine_version() + "\n")


def resolve_init_path(path: Optional[str], start_dir: Path) -> Path:
    """
    Decide where the sample build file goes.

    Args:
        path: Path given after ``-init``, if any
        start_dir: Directory the invocation started in

    Returns:
        A path that does not exist yet inside an existing directory

    Raises:
        ConfigurationError: If the file already exists or its directory does not
    """
    if not path:
        target = start_dir / DEFAULT_BUILD_FILENAME
    else:
        target = Path(path)
        if not target.is_absolute():
            target = start_dir / target

    if target.is_dir():
        target = target / DEFAULT_BUILD_FILENAME

    if target.is_file():
        raise ConfigurationError("Buildfile already exists.")
    if not target.parent.is_dir():
        raise ConfigurationError("Invalid path for sample buildfile.")
    return target


def init_build_file(path: Optional[str], start_dir: Path) -> Path:
    """
    Write the sample build file.

    Returns:
        Path of the created file

    Raises:
        ConfigurationError: If the path is invalid or the file exists
    """
    target = resolve_init_path(path, start_dir)
    try:
        with open(target, "x", encoding="utf-8") as f:
            f.write(DEFAULT_BUILD_CONTENT)
    except FileExistsError:
        raise ConfigurationError("Cannot overwrite existing file.")
    except OSError as e:
        raise ConfigurationError(f"Unable to write sample buildfile {target}: {e}", e)

    logger.info(f"Sample build file written to {target}")
    return target
