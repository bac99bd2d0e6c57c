"""Tag extensions for todo.txt lines.

An extension recognises one ``key:value`` tag, turns its value into a Python
object and strips the tag from the line. The registry is a plain ordered
tuple of extensions; each one runs on the line left over by the previous.
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .recurring import TaskRecurrence
from .utils.datetime import parse_date_or_none

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtensionMatch:
    """Result of a successful extension parse."""
    value: Any
    line: str  # line with the tag removed
    raw: str   # tag value exactly as written


class TagExtension(ABC):
    """Base class for tag extensions."""

    name: str = ""

    @abstractmethod
    def parse(self, line: str) -> Optional[ExtensionMatch]:
        """Extract this extension's tag from ``line``.

        Must not raise. Returns None when the line holds no valid tag.
        """


class DueExtension(TagExtension):
    """``due:YYYY-MM-DD``"""

    name = "due"
    pattern = re.compile(r"(?<!\S)due:(\d{4}-\d{2}-\d{2})(?:\s|$)")

    def parse(self, line: str) -> Optional[ExtensionMatch]:
        found = []

        def strip_valid(match: "re.Match") -> str:
            parsed = parse_date_or_none(match.group(1))
            if parsed is None:
                logger.debug("Ignoring malformed due tag %r", match.group(0).strip())
                return match.group(0)
            found.append((parsed, match.group(1)))
            return ""

        residual = self.pattern.sub(strip_valid, line)
        if not found:
            return None
        value, raw = found[0]
        return ExtensionMatch(value=value, line=residual, raw=raw)


class RecurrenceExtension(TagExtension):
    """``rec:<amount><unit>``, amount 1-7 and unit d, w or m."""

    name = "rec"
    pattern = re.compile(r"(?<!\S)rec:([1-7](?:d|w|m))(?:\s|$)")

    def parse(self, line: str) -> Optional[ExtensionMatch]:
        match = self.pattern.search(line)
        if not match:
            return None
        return ExtensionMatch(
            value=TaskRecurrence.parse(match.group(1)),
            line=self.pattern.sub("", line),
            raw=match.group(1),
        )


def get_extensions() -> Tuple[TagExtension, ...]:
    """Return the default registry: due date before recurrence."""
    return (DueExtension(), RecurrenceExtension())


def apply_extensions(
    line: str, extensions: Sequence[TagExtension]
) -> Tuple[Dict[str, Any], str]:
    """Run every extension once, in order, over ``line``.

    Returns:
        Tuple of (values, residual_line) where values maps extension names
        to parsed values for the extensions that matched
    """
    values: Dict[str, Any] = {}
    for extension in extensions:
        match = extension.parse(line)
        if match is None:
            continue
        values[extension.name] = match.value
        line = match.line
    return values, line

