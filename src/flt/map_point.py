"""Handles into one range of a document map."""

from __future__ import annotations

import re
from itertools import islice
from typing import TYPE_CHECKING, Optional, Sequence

from flt.runtime.telemetry import record_event, span

from .lines import TextLine

if TYPE_CHECKING:
    from .map import Map

_PLACEHOLDER = re.compile(r"\$(\$|&|\d{1,2})")


def expand_template(template: str, match: re.Match[str]) -> str:
    """Substitute ``$1``..``$99``, ``$&`` and ``$$`` in ``template``."""

    groups = match.re.groups

    def _substitute(placeholder: re.Match[str]) -> str:
        token = placeholder.group(1)
        if token == "$":
            return "$"
        if token == "&":
            return match.group(0)
        number = int(token)
        if 0 < number <= groups:
            return match.group(number) or ""
        if len(token) == 2:
            first = int(token[0])
            if 0 < first <= groups:
                return (match.group(first) or "") + token[1]
        return placeholder.group(0)

    return _PLACEHOLDER.sub(_substitute, template)


class MapPoint:
    """One range of a ``Map`` together with the text lines underneath it.

    ``offset`` is fixed when the map is built; ``text`` and ``length`` are
    read through to the lines, so they reflect edits made via ``replace`` or
    ``char_at``. Structural edits to the document make the point stale.
    """

    __slots__ = ("map", "kind", "offset", "lines")

    def __init__(
        self, map: "Map", kind: str, offset: int, lines: Sequence[TextLine]
    ) -> None:
        self.map = map
        self.kind = kind
        self.offset = offset
        self.lines = tuple(lines)

    @property
    def text(self) -> str:
        return "".join(line.text for line in self.lines)

    @property
    def length(self) -> int:
        return sum(line.length for line in self.lines)

    @property
    def end(self) -> int:
        return self.offset + self.length

    def __len__(self) -> int:
        return self.length

    def __repr__(self) -> str:
        return (
            f"MapPoint(kind={self.kind!r}, offset={self.offset}, "
            f"length={self.length})"
        )

    def locate(self, offset: int) -> tuple[int, int]:
        """Map a point-relative offset to ``(line index, offset in line)``.

        An offset on a line boundary resolves to the start of the next
        non-empty line; the end of the point resolves to the end of the last
        line.
        """

        if offset < 0:
            raise IndexError(f"offset {offset} is before the start of the point")
        position = 0
        for index, line in enumerate(self.lines):
            if offset < position + line.length:
                return index, offset - position
            position += line.length
        if offset == position and self.lines:
            return len(self.lines) - 1, self.lines[-1].length
        raise IndexError(f"offset {offset} is past the end of the point")

    def char_at(self, offset: int, replacement: Optional[str] = None) -> str:
        """Return the character at ``offset``, optionally overwriting it.

        When ``replacement`` is given it must be a single character; the
        character that was there before is returned.
        """

        if replacement is not None and len(replacement) != 1:
            raise ValueError("replacement must be exactly one character")
        index, position = self.locate(offset)
        line = self.lines[index]
        if position >= line.length:
            raise IndexError(f"offset {offset} is past the end of the point")
        current = line.text[position]
        if replacement is not None:
            line.text = line.text[:position] + replacement + line.text[position + 1 :]
        return current

    def replace(
        self,
        pattern: str | re.Pattern[str],
        replacement: str,
        *,
        count: int = 0,
    ) -> int:
        """Replace matches of ``pattern`` in this point's text, in place.

        Strings are matched literally; compiled patterns as regular
        expressions. ``count=0`` replaces every match and a negative count
        raises ``ValueError``. Matches are found on the text as it was
        before the call and a running skew keeps their
        offsets valid while earlier replacements change line lengths. A
        match running over several lines puts the whole replacement into the
        first line and trims the matched characters from the following
        ones. Returns the number of replacements made.
        """

        if count < 0:
            raise ValueError(f"count must be zero or positive, got {count}")
        if isinstance(pattern, re.Pattern):
            regex = pattern
        else:
            regex = re.compile(re.escape(pattern))
        original = self.text
        with span(
            "map_point::replace",
            component="map",
            metadata={"kind": self.kind, "offset": self.offset},
        ) as handle:
            skew = 0
            replaced = 0
            for match in islice(regex.finditer(original), count or None):
                value = expand_template(replacement, match)
                matched = match.end() - match.start()
                self._splice(match.start() + skew, matched, value)
                skew += len(value) - matched
                replaced += 1
            handle.add_metadata("replaced", replaced)

        if replaced:
            self.map.document.touch()
            record_event(
                "map_point.replace",
                data={"kind": self.kind, "replaced": replaced, "skew": skew},
            )
        return replaced

    def _splice(self, start: int, matched: int, value: str) -> None:
        index, position = self.locate(start)
        line = self.lines[index]
        text = line.text
        if position + matched <= len(text):
            line.text = text[:position] + value + text[position + matched :]
            return

        remaining = matched - (len(text) - position)
        line.text = text[:position] + value
        for following in self.lines[index + 1 :]:
            if remaining <= 0:
                break
            if remaining >= following.length:
                remaining -= following.length
                following.text = ""
            else:
                following.text = following.text[remaining:]
                remaining = 0


__all__ = ["MapPoint", "expand_template"]
