"""
Label print lists.

Staff paste or scan lines of "SKU [QTY]" (ranges allowed) and get back
the label payloads: barcode text, description and price code. Pixel
rendering is left to the barcode library of the surrounding app.

Example:
    text = '''
    DA050-DA052 2
    XR2020PKR
    ZZ999 4
    '''
    result = parse_print_list(text, catalog)
    result.total_labels   # 7 (3 x 2 + 1)
    result.not_found      # ["ZZ999"]
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal

from silversmith.codec import codify_price, decode, transliterate_for_barcode
from silversmith.exceptions import SilversmithError
from silversmith.ranges import expand_range

logger = logging.getLogger(__name__)

CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F-\x9F]")


@dataclass(frozen=True)
class Label:
    sku: str
    barcode_text: str
    description: str
    price_code: str
    quantity: int


@dataclass
class PrintList:
    labels: list[Label] = field(default_factory=list)
    not_found: list[str] = field(default_factory=list)
    errors: list[dict] = field(default_factory=list)

    @property
    def total_labels(self) -> int:
        return sum(label.quantity for label in self.labels)


def build_label(ident, quantity: int = 1, price=None, keyword: str | None = None) -> Label:
    """Label payload for a decoded identifier."""
    from silversmith.conf import get_setting

    keyword = keyword or get_setting("PRICE_CIPHER_KEYWORD")
    description = ident.finish.name
    if ident.stone.code:
        description = f"{description} - {ident.stone.name}"

    return Label(
        sku=ident.sku,
        barcode_text=transliterate_for_barcode(ident.sku),
        description=description,
        price_code=codify_price(price, keyword) if price else "",
        quantity=quantity,
    )


def _parse_line(line: str) -> tuple[str, int] | None:
    parts = CONTROL_CHARS.sub(" ", line).split()
    if not parts:
        return None
    digits = re.sub(r"[^0-9]", "", parts[1]) if len(parts) > 1 else "1"
    if not digits or int(digits) <= 0:
        return None
    return parts[0].upper(), int(digits)


def parse_print_list(text: str, catalog, prices: dict | None = None, keyword: str | None = None) -> PrintList:
    """
    Turn a pasted print list into labels.

    Args:
        text: One "TOKEN [QTY]" per line; TOKEN may be a range
        catalog: Catalog snapshot used to decode each SKU
        prices: Optional {master_sku: Decimal} for the price code
        keyword: Cipher keyword (default: PRICE_CIPHER_KEYWORD setting)

    Lines with a missing or zero quantity are skipped.
    """
    from silversmith.conf import get_setting

    prices = prices or {}
    limit = get_setting("RANGE_LIMIT")
    result = PrintList()

    for line in (text or "").splitlines():
        parsed = _parse_line(line)
        if parsed is None:
            continue
        token, quantity = parsed

        try:
            skus = expand_range(token, limit=limit)
        except SilversmithError as exc:
            result.errors.append({"token": token, **exc.as_dict()})
            continue

        for sku in skus:
            try:
                ident = decode(sku, catalog)
            except SilversmithError:
                result.not_found.append(sku)
                continue
            if not catalog.get(ident.master).has_variant(ident.suffix):
                result.not_found.append(sku)
                continue

            price = prices.get(ident.master, Decimal("0"))
            result.labels.append(build_label(ident, quantity, price, keyword))

    if result.not_found or result.errors:
        logger.info(
            f"Print list: {len(result.labels)} labels, {len(result.not_found)} not found, "
            f"{len(result.errors)} invalid ranges",
            extra={"not_found": result.not_found[:20]},
        )

    return result
