"""
SKU Variant Codec.

Splits a scanned or typed code into master SKU, finish and stone, and
builds codes back from those parts. Also carries the two text helpers
used on labels: barcode-safe transliteration and the price cipher.

Every function here is pure; the only shared state is the read-only
code tables.

Usage:
    from silversmith.codec import decode, encode

    ident = decode("DA050XCO", catalog)
    ident.master        # "DA050"
    ident.finish.code   # "X"
    ident.stone.name    # "Κόπερ"

    encode("DA050", "X", "CO")  # "DA050XCO"
"""

from __future__ import annotations

import logging
import unicodedata
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from silversmith.codes import FINISH_CODES, FINISH_LETTERS, finish_name, stone_codes_for
from silversmith.exceptions import SilversmithError

logger = logging.getLogger(__name__)


DEFAULT_PRICE_KEYWORD = "BLACKHORSE"
PRICE_DIGITS = "1234567890"

# Printable ASCII is what Code 128 and QR byte mode accept everywhere.
BARCODE_SAFE = frozenset(chr(c) for c in range(0x20, 0x7F))
BARCODE_FALLBACK = "-"

GREEK_TO_LATIN = {
    "Α": "A", "Β": "V", "Γ": "G", "Δ": "D", "Ε": "E", "Ζ": "Z", "Η": "I", "Θ": "TH",
    "Ι": "I", "Κ": "K", "Λ": "L", "Μ": "M", "Ν": "N", "Ξ": "X", "Ο": "O", "Π": "P",
    "Ρ": "R", "Σ": "S", "Τ": "T", "Υ": "Y", "Φ": "F", "Χ": "CH", "Ψ": "PS", "Ω": "O",
    "α": "a", "β": "v", "γ": "g", "δ": "d", "ε": "e", "ζ": "z", "η": "i", "θ": "th",
    "ι": "i", "κ": "k", "λ": "l", "μ": "m", "ν": "n", "ξ": "x", "ο": "o", "π": "p",
    "ρ": "r", "σ": "s", "ς": "s", "τ": "t", "υ": "y", "φ": "f", "χ": "ch", "ψ": "ps",
    "ω": "o",
}


# ══════════════════════════════════════════════════════════════
# RESULT TYPES
# ══════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FinishComponent:
    code: str
    name: str


@dataclass(frozen=True)
class StoneComponent:
    code: str
    name: str


@dataclass(frozen=True)
class VariantComponents:
    """Decomposed suffix. ``residue`` holds characters no table explained."""

    finish: FinishComponent
    stone: StoneComponent
    residue: str = ""

    @property
    def has_residue(self) -> bool:
        return bool(self.residue)

    @property
    def description(self) -> str:
        """Human label, e.g. 'Επίχρυσο - Κόπερ'."""
        parts = [self.finish.name]
        if self.stone.code:
            parts.append(self.stone.name)
        if self.residue:
            parts.append(self.residue)
        return " - ".join(parts)


@dataclass(frozen=True)
class ProductIdentifier:
    """A decoded code: catalog master plus its variant suffix."""

    master: str
    suffix: str
    finish: FinishComponent
    stone: StoneComponent
    residue: str = ""
    gender: str = ""

    @property
    def sku(self) -> str:
        return self.master + self.suffix

    @property
    def is_variant(self) -> bool:
        return bool(self.suffix)

    @property
    def has_residue(self) -> bool:
        return bool(self.residue)

    def as_dict(self) -> dict:
        return {
            "master": self.master,
            "suffix": self.suffix,
            "finish": {"code": self.finish.code, "name": self.finish.name},
            "stone": {"code": self.stone.code, "name": self.stone.name},
            "residue": self.residue,
        }


# ══════════════════════════════════════════════════════════════
# DECODE / ENCODE
# ══════════════════════════════════════════════════════════════


def barcode_key(text: str) -> str:
    """Normalized form used to compare scans with catalog SKUs."""
    return transliterate_for_barcode(text.strip()).upper()


def _match_stone(remainder: str, stones) -> tuple[str, str]:
    """
    Longest stone code at the start of the remainder -> (code, leftover).

    When that leaves characters over, the longest code at the end is
    tried too (stray leading characters, e.g. "ZCO"); the match leaving
    less residue wins, the leading one on a tie.
    """
    codes = sorted(stones, key=lambda c: (-len(c), c))

    head = next((code for code in codes if remainder.startswith(code)), "")
    leftover = remainder[len(head):]
    if not leftover:
        return head, leftover

    tail = next((code for code in codes if remainder.endswith(code)), "")
    if len(tail) > len(head):
        return tail, remainder[: len(remainder) - len(tail)]
    return head, leftover


def decompose_suffix(suffix: str, gender=None) -> VariantComponents:
    """
    Split a variant suffix into finish, stone and residue.

    Two readings are tried: finish-first (the leading letter is a finish
    code) and no-finish (the whole suffix is stone material). The reading
    leaving less residue wins; on a tie finish-first wins, so "PCO" reads
    as patina + copper rather than green copper.
    """
    suffix = suffix.upper()
    stones = stone_codes_for(gender)

    readings = []
    if suffix[:1] in FINISH_LETTERS:
        code, leftover = _match_stone(suffix[1:], stones)
        readings.append((len(leftover), 0, suffix[:1], code, leftover))
    code, leftover = _match_stone(suffix, stones)
    readings.append((len(leftover), 1, "", code, leftover))

    _, _, finish_code, stone_code, residue = min(readings)

    if residue:
        logger.warning(
            f"Suffix {suffix!r} left unrecognized residue {residue!r}",
            extra={
                "code": "AMBIGUOUS_RESIDUE",
                "suffix": suffix,
                "residue": residue,
                "gender": str(gender) if gender else None,
            },
        )

    return VariantComponents(
        finish=FinishComponent(finish_code, finish_name(finish_code)),
        stone=StoneComponent(stone_code, stones.get(stone_code, "")),
        residue=residue,
    )


def decode(raw_code: str, catalog) -> ProductIdentifier:
    """
    Resolve a raw code against the catalog.

    The longest catalog master that prefixes the code wins; the rest is
    decomposed with that product's gender.

    Raises:
        SilversmithError: UNRECOGNIZED_CODE when no master matches
    """
    key = barcode_key(raw_code or "")
    entry = catalog.match_master(key) if key else None

    if entry is None:
        raise SilversmithError("UNRECOGNIZED_CODE", raw=raw_code)

    suffix = key[len(barcode_key(entry.sku)):]
    components = decompose_suffix(suffix, entry.gender)

    return ProductIdentifier(
        master=entry.sku,
        suffix=suffix,
        finish=components.finish,
        stone=components.stone,
        residue=components.residue,
        gender=entry.gender,
    )


def encode(master: str, finish_code: str = "", stone_code: str = "") -> str:
    """Build the full code for a variant: master + finish + stone."""
    return f"{master}{finish_code}{stone_code}".upper()


# ══════════════════════════════════════════════════════════════
# LABEL TEXT
# ══════════════════════════════════════════════════════════════


def _transliterate_char(char: str) -> str:
    if char in BARCODE_SAFE:
        return char
    if char in GREEK_TO_LATIN:
        return GREEK_TO_LATIN[char]

    # Strip accents: "ά" -> "α", "é" -> "e"
    base = unicodedata.normalize("NFD", char)[0]
    if base != char:
        return _transliterate_char(base)
    return BARCODE_FALLBACK


def transliterate_for_barcode(text: str) -> str:
    """
    Map text onto printable ASCII for barcode/QR encoding.

    Greek letters get their Latin spelling, accented letters lose the
    accent and anything else becomes ``BARCODE_FALLBACK``. Output is
    always safe, so applying this twice changes nothing.
    """
    if not text:
        return ""
    return "".join(_transliterate_char(char) for char in str(text))


def _cipher_table(keyword: str) -> dict[str, str]:
    keyword = (keyword or "").upper()
    if len(keyword) != 10 or len(set(keyword)) != 10 or not keyword.isalpha():
        raise SilversmithError("INVALID_CIPHER_KEYWORD", keyword=keyword)
    return dict(zip(PRICE_DIGITS, keyword))


def codify_price(amount, keyword: str = DEFAULT_PRICE_KEYWORD) -> str:
    """
    Encode a price with a ten-letter keyword cipher.

    The price is formatted to two decimals and each digit is replaced
    by its keyword letter (1 -> first letter ... 0 -> tenth letter).

    Example (BLACKHORSE):
        codify_price(Decimal("36.90"))  # "AHSE"
    """
    table = _cipher_table(keyword)

    try:
        value = Decimal(str(amount))
        if not value.is_finite() or value <= 0:
            return ""
        value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        return ""

    digits = str(value).replace(".", "")
    return "".join(table[digit] for digit in digits)


def decode_price(cipher: str, keyword: str = DEFAULT_PRICE_KEYWORD) -> Decimal:
    """Reverse of codify_price."""
    reverse = {letter: digit for digit, letter in _cipher_table(keyword).items()}
    try:
        digits = "".join(reverse[letter] for letter in cipher.upper())
    except KeyError as exc:
        raise SilversmithError("INVALID_PRICE_CODE", cipher=cipher) from exc
    if not digits:
        return Decimal("0.00")
    return Decimal(digits) / 100


__all__ = [
    "FINISH_CODES",
    "FinishComponent",
    "StoneComponent",
    "VariantComponents",
    "ProductIdentifier",
    "barcode_key",
    "decompose_suffix",
    "decode",
    "encode",
    "transliterate_for_barcode",
    "codify_price",
    "decode_price",
]
