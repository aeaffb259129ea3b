"""Carrier tracking-number recognition.

The tracking-number filter only depends on the ``CarrierRecognizer``
protocol: ``scan(text)`` returns the candidate numbers in text order, each
with a carrier tag and a canonical number.  ``ChecksumRecognizer`` is the
built-in implementation; it knows the formats the filter can link, each
validated by its published check-digit scheme.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class TrackingCandidate:
    """A tracking number found in text."""

    matched: str  # substring exactly as it appears in the text
    carrier: str  # e.g. "ups", "fedex", "ontrac", "usps"
    number: str  # canonical (uppercased) tracking number


@runtime_checkable
class CarrierRecognizer(Protocol):
    """Scans text for tracking numbers."""

    def scan(self, text: str) -> list[TrackingCandidate]: ...


def _char_value(char: str) -> int:
    """Numeric value of a serial character (letters fold onto 0-9)."""
    if char.isdigit():
        return int(char)
    return (ord(char.upper()) - 3) % 10


def _check_value(char: str) -> int:
    return int(char) if char.isdigit() else 0


def mod10(
    serial: str,
    check: str,
    *,
    evens_multiplier: int = 1,
    odds_multiplier: int = 1,
) -> bool:
    """Weighted mod-10 check.

    "Evens" are the odd 0-based indices (2nd, 4th, ... characters).
    """
    total = 0
    for i, char in enumerate(serial):
        value = _char_value(char)
        value *= evens_multiplier if i % 2 else odds_multiplier
        total += value
    expected = total % 10
    if expected:
        expected = 10 - expected
    return expected == _check_value(check)


def mod11(serial: str, check: str, weights: tuple[int, ...]) -> bool:
    """Weighted mod-11 check; a remainder of 10 maps to 0."""
    total = sum(int(char) * weight for char, weight in zip(serial, weights))
    expected = total % 11
    if expected == 10:
        expected = 0
    return expected == _check_value(check)


@dataclass(frozen=True, slots=True)
class _CarrierFormat:
    carrier: str
    name: str
    pattern: re.Pattern[str]
    validate: Callable[[str, str], bool]


def _bounded(body: str) -> re.Pattern[str]:
    """Compile *body* so it only matches a whole alphanumeric token."""
    return re.compile(rf"(?<![A-Za-z0-9]){body}(?![A-Za-z0-9])", re.IGNORECASE)


_FEDEX_EXPRESS_WEIGHTS = (3, 1, 7, 3, 1, 7, 3, 1, 7, 3, 1)

# Order matters only for ties: longer matches always win an overlap.
_FORMATS: tuple[_CarrierFormat, ...] = (
    _CarrierFormat(
        carrier="ups",
        name="UPS 1Z",
        pattern=_bounded(r"1Z(?P<serial>[A-Z0-9]{15})(?P<check>[A-Z0-9])"),
        validate=lambda serial, check: mod10(serial, check, evens_multiplier=2),
    ),
    _CarrierFormat(
        carrier="fedex",
        name="FedEx Ground 96",
        pattern=_bounded(r"96\d{5}(?P<serial>\d{14})(?P<check>\d)"),
        validate=lambda serial, check: mod10(serial, check, evens_multiplier=3),
    ),
    _CarrierFormat(
        carrier="fedex",
        name="FedEx Express",
        pattern=_bounded(r"(?P<serial>\d{11})(?P<check>\d)"),
        validate=lambda serial, check: mod11(serial, check, _FEDEX_EXPRESS_WEIGHTS),
    ),
    _CarrierFormat(
        carrier="ontrac",
        name="OnTrac",
        pattern=_bounded(r"(?P<serial>C\d{13})(?P<check>\d)"),
        validate=lambda serial, check: mod10(serial, check, evens_multiplier=2),
    ),
    _CarrierFormat(
        carrier="usps",
        name="USPS 20",
        pattern=_bounded(r"(?P<serial>\d{19})(?P<check>\d)"),
        validate=lambda serial, check: mod10(serial, check, evens_multiplier=3),
    ),
)


class ChecksumRecognizer:
    """Recognises UPS, FedEx, OnTrac and USPS numbers by format and check digit."""

    def __init__(self, formats: tuple[_CarrierFormat, ...] = _FORMATS) -> None:
        self.formats = formats

    def scan(self, text: str) -> list[TrackingCandidate]:
        """Return valid tracking numbers in *text*, in text order."""
        found: list[tuple[int, int, TrackingCandidate]] = []
        for fmt in self.formats:
            for m in fmt.pattern.finditer(text):
                if not fmt.validate(m.group("serial"), m.group("check")):
                    continue
                matched = m.group()
                candidate = TrackingCandidate(
                    matched=matched,
                    carrier=fmt.carrier,
                    number=matched.upper(),
                )
                found.append((m.start(), m.end(), candidate))
        return _deduplicate(found)

    def __repr__(self) -> str:
        names = ", ".join(fmt.name for fmt in self.formats)
        return f"ChecksumRecognizer({names})"


def _deduplicate(
    found: list[tuple[int, int, TrackingCandidate]],
) -> list[TrackingCandidate]:
    """Drop overlapping matches, keeping the longer one."""
    if not found:
        return []
    ranked = sorted(
        enumerate(found), key=lambda item: (-(item[1][1] - item[1][0]), item[0])
    )
    taken: list[tuple[int, int, TrackingCandidate]] = []
    for _, (start, end, candidate) in ranked:
        if not any(start < e and end > s for s, e, _ in taken):
            taken.append((start, end, candidate))
    return [candidate for _, _, candidate in sorted(taken, key=lambda t: t[0])]


DEFAULT_RECOGNIZER = ChecksumRecognizer()
