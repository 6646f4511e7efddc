"""Paginated plain-text reports of knowledge files.

The entries of every record are filled into lines of a fixed width,
indented by their outline level, and laid out on pages that carry a
header and a footer.
"""

from __future__ import annotations

import datetime
import sys
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, TextIO

from cipskit.knowledge import (
    add_indents,
    convert_lines_to_words,
    number_of_indent_levels,
    read_records,
    split_entries,
    strip_characters,
)

LINES_PER_PAGE = 66
CHARS_PER_LINE = 85
FOOTER = 5
LEFT_MARGIN = 10
RIGHT_MARGIN = 5
HEADER_LINES = 5
BLANK_LINES_AFTER_RECORD = 3
VERSION = "kf Version 2"

TEXT_WIDTH = CHARS_PER_LINE - (RIGHT_MARGIN + LEFT_MARGIN)
"""Longest line of text, before indenting, that a paragraph produces."""

_HEADER_WIDTH = CHARS_PER_LINE - LEFT_MARGIN - 2 * RIGHT_MARGIN
_PAGE_LABEL_WIDTH = 9
_FOOTER_MARK = "\n" + " " * 20 + "."

_USAGE = (
    "usage: kf in-file out-file -d -p -n # -l # -t ...\n"
    "         -d     = put the date in the header\n"
    "         -p     = put the page number in the header\n"
    f"         -l #   = there are # lines per page ({LINES_PER_PAGE} default)\n"
    "         -n #   = start numbering the pages with #\n"
    "         -ds    = double space print the output\n"
    "         -t ... = put the following title in the header\n"
    f"{VERSION}"
)


def _right_aligned(text: str, width: int) -> str:
    return "\n" + " " * max(width - 1, 0) + text


@dataclass
class ReportWriter:
    """Writes paragraphs onto numbered pages of a text stream.

    ``line_counter`` is the number of lines already on the current page and
    ``page_counter`` the number of the current page. ``today`` fixes the
    date printed in the header; it defaults to the current date.
    """

    stream: TextIO
    title: str = ""
    print_date: bool = False
    print_page: bool = False
    double_space: bool = False
    lines_per_page: int = LINES_PER_PAGE
    page_counter: int = 1
    line_counter: int = 0
    today: Optional[datetime.date] = None

    def _date_string(self) -> str:
        day = self.today or datetime.date.today()
        return f"{day.month}-{day.day}-{day.year - 1900}"

    def _header_text(self) -> Optional[str]:
        if self.title and self.print_date:
            return f"{self.title} - {self._date_string()}"
        if self.title:
            return self.title
        if self.print_date:
            return self._date_string()
        return None

    def print_report_header(self):
        """Write the five header lines that open a page."""
        text = self._header_text()
        header = "\n" if text is None else _right_aligned(
            text, _HEADER_WIDTH - len(text)
        )
        if self.print_page:
            page = _right_aligned(
                f"Page {self.page_counter:4d}",
                _HEADER_WIDTH - _PAGE_LABEL_WIDTH,
            )
        else:
            page = "\n"
        self.stream.write("\n" + "\n" + header + page + "\n")
        self.line_counter = HEADER_LINES

    def fill_page(self):
        """Pad the current page with blank lines, write its footer and turn it."""
        blank = max(self.lines_per_page - FOOTER - self.line_counter, 0)
        self.stream.write("\n" * blank)
        self.stream.write("\n" * (FOOTER - 2))
        self.stream.write(_FOOTER_MARK)
        self.stream.write("\n")
        self.line_counter = 0
        self.page_counter += 1

    def _count_line(self) -> None:
        self.line_counter += 1
        if self.line_counter >= self.lines_per_page - FOOTER:
            self.fill_page()
            self.print_report_header()

    def output_line(self, line):
        """Write one line, starting a new page when the page is full."""
        self.stream.write(line)
        self._count_line()
        if self.double_space:
            self.stream.write("\n")
            self._count_line()

    def _emit(self, line: str, spaces: int) -> None:
        self.output_line(add_indents(strip_characters(line + "\n"), spaces))

    def write_paragraph(self, words):
        """Fill ``words`` into lines no wider than :data:`TEXT_WIDTH`.

        The paragraph is indented by the outline level of its first word.
        """
        words = list(words)
        if not words:
            return
        spaces = number_of_indent_levels(words[0])
        last = len(words) - 1
        line = ""
        for index, word in enumerate(words):
            if len(word) + len(line) > TEXT_WIDTH:
                self._emit(line, spaces)
                line = word
            else:
                line += word
            if index == last:
                self._emit(line, spaces)

    def write_record(self, lines):
        """Write every entry of a record, then a few blank lines."""
        for entry in split_entries(lines):
            self.write_paragraph(convert_lines_to_words(entry))
        for _ in range(BLANK_LINES_AFTER_RECORD):
            self.output_line("\n")


class _UsageError(ValueError):
    pass


def _int_option(values: Iterator[str], option: str) -> int:
    value = next(values, None)
    if value is None:
        raise _UsageError(f"option {option} needs a number")
    try:
        return int(value)
    except ValueError:
        raise _UsageError(f"option {option} needs a number, not {value!r}") from None


def _parse_options(options: Iterable[str]) -> dict:
    settings: dict = {
        "title": "",
        "print_date": False,
        "print_page": False,
        "double_space": False,
        "lines_per_page": LINES_PER_PAGE,
        "page_counter": 1,
    }
    values = iter(options)
    for option in values:
        if option == "-ds":
            settings["double_space"] = True
        elif option == "-d":
            settings["print_date"] = True
        elif option == "-p":
            settings["print_page"] = True
        elif option == "-l":
            settings["lines_per_page"] = _int_option(values, option)
        elif option == "-n":
            settings["page_counter"] = _int_option(values, option)
        elif option == "-t":
            settings["title"] = " " + "".join(f"{word} " for word in values)
    return settings


def main(argv=None):
    """Format a knowledge file into a paginated text report."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) < 2:
        print(_USAGE, file=sys.stderr)
        return 1
    in_name, out_name, *options = args
    try:
        settings = _parse_options(options)
    except _UsageError as error:
        print(f"ERROR {error}", file=sys.stderr)
        return 1

    try:
        source = open(in_name)
    except OSError:
        print(f"ERROR Could not open file {in_name}", file=sys.stderr)
        return 2
    with source:
        try:
            target = open(out_name, "w")
        except OSError:
            print(f"ERROR Could not open file {out_name}", file=sys.stderr)
            return 2
        with target:
            writer = ReportWriter(target, **settings)
            writer.print_report_header()
            for record in read_records(source):
                writer.write_record(record)
    return 0


if __name__ == "__main__":
    sys.exit(main())