"""
Project help output for ``-projecthelp``.

Lists the visible targets of a configured project in three sections: the
default target, main targets (those with a description) and subtargets.
"""

from itertools import zip_longest
from typing import Any, Iterable, List

from ..models.config import MessageLevel

RULE_WIDTH = 79


def format_target_list(title: str, targets: Iterable[Any], padding: int) -> str:
    """
    Render one titled, name-sorted target section.

    Args:
        title: Section title, e.g. ``Main targets:``
        targets: Targets in the section
        padding: Width of the name column

    Returns:
        The section text, ending with a newline
    """
    header = f"{title}\n{'-' * RULE_WIDTH}\n"
    blocks: List[str] = []
    for target in sorted(targets, key=lambda t: t.name):
        details = []
        if target.description:
            details.append(target.description)
        if target.depends:
            details.append(f" - depends on: {', '.join(target.depends)}")
        if target.if_property:
            details.append(f" - if property: {target.if_property}")
        if target.unless_property:
            details.append(f" - unless property: {target.unless_property}")

        lines = [
            f" {name:<{padding}}  {detail}"
            for name, detail in zip_longest([target.name], details, fillvalue="")
        ]
        blocks.append("\n".join(lines))
    return header + "\n".join(blocks) + "\n"


def print_description(project: Any) -> None:
    if project.description:
        project.log(project.description, MessageLevel.INFO)


def print_targets(project: Any) -> None:
    """Log the three target sections of ``project`` at WARN."""
    visible = [t for t in project.targets.values() if not t.hidden and t.name]
    padding = max((len(t.name) for t in visible), default=0)
    categories = {
        "Default target:": [t for t in visible if t.name == project.default_target],
        "Main targets:": [t for t in visible if t.description],
        "Subtargets:": [t for t in visible if not t.description],
    }
    for title, targets in categories.items():
        project.log(format_target_list(title, targets, padding), MessageLevel.WARN)
