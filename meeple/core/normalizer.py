"""Keyboard layout normalization for scanned and typed tokens.

Barcode and QR scanners emit raw keystrokes, which the OS interprets
with whatever keyboard layout is active. A label printed as ``Catan``
scanned while the Thai layout is active arrives as ``แฟะฟื``. The
tables below align the US QWERTY and Thai Kedmanee layouts key by key
so either direction can be undone.
"""

from typing import Iterator, NamedTuple

# Rows in physical key order: number row, top, home, bottom.
LATIN_LAYOUT = (
    "`1234567890-="
    "qwertyuiop[]\\"
    "asdfghjkl;'"
    "zxcvbnm,./"
    "~!@#$%^&*()_+"
    "QWERTYUIOP{}|"
    "ASDFGHJKL:\""
    "ZXCVBNM<>?"
)

THAI_LAYOUT = (
    "_ๅ/-ภถุึคตจขช"
    "ๆไำพะัีรนยบลฃ"
    "ฟหกดเ้่าสวง"
    "ผปแอิืทมใฝ"
    "%+๑๒๓๔ู฿๕๖๗๘๙"
    "๐\"ฎฑธํ๊ณฯญฐ,ฅ"
    "ฤฆฏโฌ็๋ษศซ."
    "()ฉฮฺ์?ฒฬฦ"
)

THAI_DIGITS = "๐๑๒๓๔๕๖๗๘๙"


def _build_table(source: str, target: str) -> dict:
    if len(source) != len(target):
        raise ValueError(
            f"Layouts are not aligned: {len(source)} != {len(target)} keys")
    table = {}
    for src, dst in zip(source, target):
        # first position wins should a layout ever repeat a character
        table.setdefault(src, dst)
    return table


LATIN_TO_THAI = _build_table(LATIN_LAYOUT, THAI_LAYOUT)
THAI_TO_LATIN = _build_table(THAI_LAYOUT, LATIN_LAYOUT)
LEGACY_DIGITS = _build_table(THAI_DIGITS, "0123456789")


def _translate(token: str, table: dict) -> str:
    return "".join(table.get(c, c) for c in token)


def latin_to_thai(token: str) -> str:
    return _translate(token, LATIN_TO_THAI)


def thai_to_latin(token: str) -> str:
    return _translate(token, THAI_TO_LATIN)


def legacy_digits(token: str) -> str:
    return _translate(token, LEGACY_DIGITS)


class NormalizedToken(NamedTuple):
    as_typed: str
    latin_to_thai: str
    thai_to_latin: str
    legacy: str

    def variants(self) -> Iterator[str]:
        """Distinct candidates, most literal first."""
        seen = set()
        for candidate in (self.as_typed, self.thai_to_latin,
                          self.latin_to_thai, self.legacy):
            if candidate not in seen:
                seen.add(candidate)
                yield candidate


def normalize(token: str) -> NormalizedToken:
    return NormalizedToken(
        as_typed=token,
        latin_to_thai=latin_to_thai(token),
        thai_to_latin=thai_to_latin(token),
        legacy=legacy_digits(token),
    )
