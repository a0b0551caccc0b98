"""
Build file resolution.

Turns the build file options of an invocation into a concrete, existing
build file path: an explicit ``-buildfile``, an upward ``-find`` search, or
the default file name in the working directory, with a ``.dist`` sibling as
fallback.
"""

import logging
from pathlib import Path
from typing import Optional, TextIO

from ..config.settings import DEFAULT_BUILD_FILENAME, DIST_SUFFIX
from ..models.config import BuildConfiguration, MessageLevel
from ..validation import ConfigurationError

logger = logging.getLogger(__name__)


class BuildFileLocator:
    """
    Resolves the build file of an invocation.

    Args:
        cwd: Directory relative paths and searches start from
        out: Stream the search announcement is written to, if any
    """

    def __init__(self, cwd: Path, out: Optional[TextIO] = None):
        self.cwd = Path(cwd)
        self.out = out

    def locate(self, configuration: BuildConfiguration) -> Path:
        """
        Resolve and verify the build file.

        Returns:
            Absolute path of an existing regular file

        Raises:
            ConfigurationError: If no build file can be found, or the resolved
                path is missing, a directory, or unreadable
        """
        if configuration.build_file is not None:
            build_file = self._absolute(configuration.build_file)
        elif configuration.search_for is not None:
            build_file = self.find_build_file(
                configuration.search_for,
                announce=configuration.message_level >= MessageLevel.INFO,
            )
        else:
            build_file = self.cwd / DEFAULT_BUILD_FILENAME

        return self.verify(build_file)

    def find_build_file(self, name: str, announce: bool = True) -> Path:
        """
        Search ``name`` in the working directory and each of its parents.

        Args:
            name: File name to look for
            announce: Whether to print ``Searching for <name> ...`` first

        Returns:
            The first match, closest to the working directory

        Raises:
            ConfigurationError: If the filesystem root is reached without a match
        """
        if announce and self.out is not None:
            self.out.write(f"Searching for {name} ...\n")

        start = self.cwd.resolve()
        directory = start
        while True:
            candidate = directory / name
            if candidate.exists():
                logger.debug(f"Found build file {candidate} searching from {start}")
                return candidate
            if directory.parent == directory:
                raise ConfigurationError(
                    f"No build file found: could not locate {name} in {start} or any parent directory"
                )
            directory = directory.parent

    def verify(self, build_file: Path) -> Path:
        """
        Check the build file exists and is not a directory.

        A missing file is replaced by its ``.dist`` sibling when that exists.
        """
        try:
            if not build_file.exists():
                dist_file = build_file.with_name(build_file.name + DIST_SUFFIX)
                if not dist_file.exists():
                    raise ConfigurationError(f"Buildfile: {build_file} does not exist!")
                logger.debug(f"Using distribution build file {dist_file}")
                build_file = dist_file

            if build_file.is_dir():
                raise ConfigurationError(f"Buildfile: {build_file} is a dir!")
        except OSError as e:
            raise ConfigurationError(f"Buildfile: {build_file} is not readable!", e)

        return build_file

    def _absolute(self, path: Path) -> Path:
        path = Path(path).expanduser()
        if not path.is_absolute():
            path = self.cwd / path
        return path
