"""
Fixed settings and well-known property names.

This module centralizes the constants that the controller, the logger and
the engine agree on.
"""

import logging
import os

ENGINE_NAME = "buildctl"
ENGINE_VERSION = "1.0.0"

# The build file assumed when neither -buildfile nor -find is given.
DEFAULT_BUILD_FILENAME = "build.toml"

# Suffix tried when the resolved build file does not exist.
DIST_SUFFIX = ".dist"

DEFAULT_BUILD_CONTENT = """\
[project]
name = ""
description = ""
default = "main"

[properties]

[targets.main]
description = ""
tasks = []
"""

# Environment variable controlling internal logging.
LOG_LEVEL_ENV_VAR = "BUILDCTL_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class PropertyNames:
    """Property names set by the controller before the build starts."""

    BUILD_FILE = "buildctl.file"
    BUILD_DIR = "buildctl.dir"
    VERSION = "buildctl.version"
    SHOW_LONG_TARGETS = "buildctl.showlongtargets"
    START_TIME = "buildctl.startTime"
    START_DIR = "application.startdir"


def get_engine_version() -> str:
    """Return the display version, e.g. ``buildctl 1.0.0``."""
    return f"{ENGINE_NAME} {ENGINE_VERSION}"


def get_log_level() -> int:
    """
    Resolve the internal logging level from the environment.

    Unknown names fall back to the default level.
    """
    name = os.environ.get(LOG_LEVEL_ENV_VAR, DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.getLevelName(DEFAULT_LOG_LEVEL)
