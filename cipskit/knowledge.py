"""Parsing of knowledge files: records, entries and the words of an entry.

A knowledge file holds records. A record starts with a line that begins
``<START>`` and ends with a line that begins ``<END>``. Inside a record,
every line that begins with ``<`` (a tagged line such as ``<T>``) or ``.``
(an outline point, one period per indent level) starts a new entry. Any
other line continues the entry above it.
"""

from __future__ import annotations

from typing import Iterable, Iterator, TextIO

RECORD_START = "<START>"
RECORD_END = "<END>"
ENTRY_MARKERS = ("<", ".")
INDENT = "  "


def read_records(stream: TextIO) -> Iterator[list[str]]:
    """Yield the lines of each record in ``stream``.

    Lines before a ``<START>`` line are skipped. The start and end lines are
    not part of the record. A record that runs to the end of the stream
    without an ``<END>`` line holds every line up to that point.
    """
    lines = iter(stream)
    for line in lines:
        if not line.startswith(RECORD_START):
            continue
        record = []
        for body_line in lines:
            if body_line.startswith(RECORD_END):
                break
            record.append(body_line)
        yield record


def _starts_entry(line: str) -> bool:
    return line.startswith(ENTRY_MARKERS)


def split_entries(lines: Iterable[str]) -> list[list[str]]:
    """Group the lines of a record into entries.

    Each entry begins with a line starting ``<`` or ``.`` and takes the
    lines after it up to the next such line. Lines before the first entry
    belong to no entry and are dropped.
    """
    entries: list[list[str]] = []
    for line in lines:
        if _starts_entry(line):
            entries.append([line])
        elif entries:
            entries[-1].append(line)
    return entries


def _line_words(line: str) -> Iterator[str]:
    text = line if line.endswith("\n") else line + "\n"
    start = index = 0
    while True:
        char = text[index]
        if char == "\n":
            yield text[start:index] + " "
            return
        if char == " ":
            end = index + 1
            if text[end] == " ":
                end += 1
            yield text[start:end]
            start = index = end
            continue
        index += 1


def convert_lines_to_words(lines: Iterable[str]) -> list[str]:
    """Split lines into words that keep their trailing spaces.

    A word ends at a space, which stays with it, together with a second
    space that directly follows. The end of a line ends a word and is
    turned into a single space, so an empty line gives the word ``" "``.
    """
    return [word for line in lines for word in _line_words(line)]


def strip_characters(line: str) -> str:
    """Remove the formatting marks from the start of a line.

    A line that starts with ``.`` loses all of its periods; a line that
    starts with ``<`` loses everything up to and including the first ``>``.
    Other lines are returned unchanged.
    """
    if line.startswith("."):
        return line.replace(".", "")
    if line.startswith("<"):
        _, found, rest = line.partition(">")
        return rest if found else ""
    return line


def number_of_indent_levels(line: str) -> int:
    """Return the number of periods that open ``line``."""
    return len(line) - len(line.lstrip("."))


def add_indents(line: str, spaces: int) -> str:
    """Return ``line`` indented by two spaces for each level in ``spaces``."""
    return INDENT * max(spaces, 0) + line