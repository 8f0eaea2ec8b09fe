"""
Parse smbclient directory listings into DirectoryEntry records.

Every line goes through an ordered chain of matchers. Each matcher either
returns an entry or None, and the last one always matches, so parsing never
loses or rejects a line. Noise (``.``, ``..``, block-count footers) is dropped
by a separate pass.
"""

import re
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from smbbridge.model.share import DirectoryEntry, attribute_flags

ATTRIBUTE_ALPHABET = frozenset("ADHRSNVTCEOIL")

_DIGITS = re.compile(r"^\d+$")
_WHITESPACE = re.compile(r"\s+")
_CLOCK = re.compile(r"^\d{1,2}:\d{2}:\d{2}$")
_YEAR = re.compile(r"^\d{4}$")
_FOOTERS = (
    re.compile(r"blocks available", re.IGNORECASE),
)

Matcher = Callable[[str], Optional[DirectoryEntry]]


def is_attribute_string(value: str) -> bool:
    """True for '' or a run of distinct SMB attribute flags (e.g. ``DHS``)."""
    return (
        all(c in ATTRIBUTE_ALPHABET for c in value)
        and len(set(value)) == len(value)
    )


def _pipe_fields(line: str) -> Optional[List[str]]:
    if "|" not in line:
        return None
    fields = [f.strip() for f in line.split("|")]
    if len(fields) < 5 or not _DIGITS.match(fields[1]):
        return None
    return fields


def match_pipe_name_first(line: str) -> Optional[DirectoryEntry]:
    """``name|size|date|time|attributes``"""
    fields = _pipe_fields(line)
    if fields is None or not is_attribute_string(fields[4]):
        return None
    return DirectoryEntry(
        name=fields[0],
        size=int(fields[1]),
        date=fields[2],
        time=fields[3],
        attributes=attribute_flags(fields[4]),
    )


def match_pipe_attributes_first(line: str) -> Optional[DirectoryEntry]:
    """``attributes|size|date|time|name``; the name may itself contain ``|``."""
    fields = _pipe_fields(line)
    if fields is None or not is_attribute_string(fields[0]):
        return None
    # keep the name exactly as it appeared, pipes included
    name = line.split("|", 4)[4].strip()
    return DirectoryEntry(
        name=name,
        size=int(fields[1]),
        date=fields[2],
        time=fields[3],
        attributes=attribute_flags(fields[0]),
    )


def match_pipe_opaque(line: str) -> Optional[DirectoryEntry]:
    if "|" not in line:
        return None
    return DirectoryEntry(name=line)


def match_space_columns(line: str) -> Optional[DirectoryEntry]:
    """
    ``<name> <attr> <size> <Wkd> <Mon> <dd> <hh:mm:ss> <yyyy>``

    Fields are taken from the right so names with embedded spaces survive.
    """
    if "|" in line:
        return None

    tokens = _WHITESPACE.sub(" ", line).strip().split(" ")
    if len(tokens) < 8:
        return None

    attr, size, weekday, month, day, clock, year = tokens[-7:]
    if not _CLOCK.match(clock) or not _YEAR.match(year):
        return None

    return DirectoryEntry(
        name=" ".join(tokens[:-7]),
        size=int(size) if _DIGITS.match(size) else 0,
        date=f"{weekday} {month} {day} {clock} {year}",
        time=clock,
        attributes=attribute_flags(attr),
    )


def match_anything(line: str) -> DirectoryEntry:
    return DirectoryEntry(name=line)


LINE_MATCHERS: Tuple[Matcher, ...] = (
    match_pipe_name_first,
    match_pipe_attributes_first,
    match_pipe_opaque,
    match_space_columns,
    match_anything,
)


def parse_line(line: str, matchers: Sequence[Matcher] = LINE_MATCHERS) -> DirectoryEntry:
    for matcher in matchers:
        entry = matcher(line)
        if entry is not None:
            return entry
    return match_anything(line)


def parse_lines(text: str) -> List[DirectoryEntry]:
    """Parse every non-blank line; never raises and never drops a line."""
    entries = []
    for raw in (text or "").splitlines():
        line = raw.strip()
        if line:
            entries.append(parse_line(line))
    return entries


def is_noise(entry: DirectoryEntry) -> bool:
    if entry.name in (".", ".."):
        return True
    if _DIGITS.match(entry.name):
        return True
    for pattern in _FOOTERS:
        if pattern.search(entry.name) or pattern.search(entry.date or ""):
            return True
    return False


def filter_noise(entries: Iterable[DirectoryEntry]) -> List[DirectoryEntry]:
    return [e for e in entries if not is_noise(e)]


def parse_listing(text: str) -> List[DirectoryEntry]:
    return filter_noise(parse_lines(text))
