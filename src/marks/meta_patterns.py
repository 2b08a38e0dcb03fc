"""
Separator-tolerant matching of page metadata.

Rows are matched in two renderings:
- dotted: glyph values joined by "." (letters may arrive one glyph each)
- raw: glyph values concatenated (used for digit extraction)

Keyword patterns accept one optional separator ("." or whitespace) between
every pair of letters, and an optional "ال" article prefix.
"""

from __future__ import annotations

import re

SEP = r"[.\s]"
_SEP_RE = re.compile(SEP)


def spaced(word: str) -> str:
    """Regex source for `word` with an optional separator between letters."""
    return f"{SEP}?".join(re.escape(ch) for ch in word)


def keyword(word: str) -> str:
    """`word` or `ال` + `word`, separator-tolerant."""
    return f"(?:{spaced(word)}|{spaced('ال' + word)})"


def strip_separators(s: str) -> str:
    return _SEP_RE.sub("", s)


def reverse_digits(s: str) -> str:
    # Digit runs of right-to-left pages are extracted back to front.
    return s[::-1]


_SEMESTER_NAMES = ("اول", "أول", "الاول", "الأول", "ثاني", "الثاني")
_SEMESTER_FIRST = frozenset({"اول", "أول"})
_SEMESTER_SECOND = frozenset({"ثاني"})

SEMESTER_PATTERN = re.compile(
    keyword("فصل") + f"{SEP}*" + "(?:" + "|".join(spaced(n) for n in _SEMESTER_NAMES) + ")"
)
_SEMESTER_PREFIX = re.compile(r"^(?:الفصل|فصل)")
_ARTICLE_PREFIX = re.compile(r"^ال")

# Tried in order; first match wins.
YEAR_PATTERNS = (
    re.compile(r"([0-9]{4})\\([0-9]{4})"),
    re.compile(r"([0-9]{4})/([0-9]{4})"),
    re.compile(r"([0-9]{4})\s*-\s*([0-9]{4})"),
)

SUBJECT_PATTERN = re.compile(keyword("مقرر") + "(.+)")

STUDENTS_PATTERN = re.compile(keyword("متقدمين"))
_DIGIT_RUN = re.compile(r"[0-9]+")


def match_semester(dotted: str) -> str | None:
    m = SEMESTER_PATTERN.search(dotted)
    if m is None:
        return None
    word = _SEMESTER_PREFIX.sub("", strip_separators(m.group(0)))
    word = _ARTICLE_PREFIX.sub("", word)
    if word in _SEMESTER_FIRST:
        return "1"
    if word in _SEMESTER_SECOND:
        return "2"
    return "3"


def match_year(raw: str) -> str | None:
    for pattern in YEAR_PATTERNS:
        m = pattern.search(raw)
        if m is not None:
            return f"{reverse_digits(m.group(1))}/{reverse_digits(m.group(2))}"
    return None


def match_subject(dotted: str) -> str | None:
    m = SUBJECT_PATTERN.search(dotted)
    if m is None:
        return None
    return strip_separators(m.group(1))


def match_students(dotted: str, raw: str) -> str | None:
    if STUDENTS_PATTERN.search(dotted) is None:
        return None
    runs = _DIGIT_RUN.findall(raw)
    if not runs:
        return None
    return reverse_digits("".join(runs))
