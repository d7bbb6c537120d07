"""
Code tables for SKU variant suffixes.

Finish codes are shared by every catalog. Stone codes are scoped by
gender: the same letters can name different stones in the men's and
women's lines, so lookups always go through ``stone_codes_for(gender)``.

Tables are read-only mappings built once at import.
"""

from types import MappingProxyType

from django.db import models
from django.utils.translation import gettext_lazy as _


class Gender(models.TextChoices):
    """Catalog line a product belongs to."""

    MEN = "men", _("Men")
    WOMEN = "women", _("Women")
    UNISEX = "unisex", _("Unisex")


FINISH_CODES = MappingProxyType(
    {
        "": "Λουστρέ",
        "P": "Πατίνα",
        "X": "Επίχρυσο",
        "D": "Δίχρωμο",
        "H": "Επιπλατινωμένο",
    }
)

# Single letters that may open a suffix.
FINISH_LETTERS = frozenset(code for code in FINISH_CODES if code)

_STONES_WOMEN = {
    "CO": "Κόπερ",
    "PCO": "Πράσινο Κόπερ",
    "MCO": "Μωβ Κόπερ",
    "PAX": "Πράσινος Αχάτης",
    "MAX": "Μπλε Αχάτης",
    "KAX": "Κόκκινος Αχάτης",
    "AI": "Αιματίτης",
    "AP": "Απατίτης",
    "AM": "Αμαζονίτης",
    "LR": "Λαμπραδορίτης",
    "LA": "Λάπις",
    "FI": "Φίλντισι",
    "TPR": "Τριπλέτα Πράσινη",
    "TKO": "Τριπλέτα Κόκκινη",
    "TMP": "Τριπλέτα Μπλε",
    "BST": "Blue Sky Topaz",
}

_STONES_MEN = {
    "KR": "Κορνεόλη",
    "LA": "Λάπις",
    "LE": "Χαολίτης",
    "AX": "Αχάτης",
    "TG": "Μάτι Τίγρης",
    "QN": "Όνυχας",
    "TY": "Τυρκουάζ",
}

STONE_CODES = MappingProxyType(
    {
        Gender.MEN: MappingProxyType(dict(_STONES_MEN)),
        Gender.WOMEN: MappingProxyType(dict(_STONES_WOMEN)),
        Gender.UNISEX: MappingProxyType({**_STONES_MEN, **_STONES_WOMEN}),
    }
)

del _STONES_MEN, _STONES_WOMEN


def stone_codes_for(gender) -> MappingProxyType:
    """Stone table for a gender; unknown or missing gender gets the union."""
    try:
        return STONE_CODES[Gender(gender)]
    except ValueError:
        return STONE_CODES[Gender.UNISEX]


def finish_name(code: str) -> str:
    """Display name of a finish code, lustre when unknown."""
    return FINISH_CODES.get(code, FINISH_CODES[""])


# ══════════════════════════════════════════════════════════════
# SKU PREFIXES
# ══════════════════════════════════════════════════════════════

PREFIX_CATEGORIES = MappingProxyType(
    {
        "DA": (Gender.WOMEN, "Δαχτυλίδι"),
        "SK": (Gender.WOMEN, "Σκουλαρίκια"),
        "MN": (Gender.WOMEN, "Μενταγιόν"),
        "BR": (Gender.WOMEN, "Βραχιόλι"),
        "CR": (Gender.MEN, "Σταυρός"),
        "RN": (Gender.MEN, "Δαχτυλίδι"),
        "PN": (Gender.MEN, "Μενταγιόν"),
    }
)

# XR bracelets: (last number of the band, gender, category)
XR_BANDS = (
    (100, Gender.MEN, "Βραχιόλι Δερμάτινο"),
    (199, Gender.MEN, "Βραχιόλι Μασίφ"),
    (700, Gender.UNISEX, "Βραχιόλι με Πέτρες"),
    (1099, Gender.UNISEX, "Βραχιόλι Μακραμέ Πολύχρωμο"),
    (1149, Gender.UNISEX, "Βραχιόλι Μακραμέ Θρησκευτικό"),
    (1199, Gender.UNISEX, "Βραχιόλι Μακραμέ Πολύχρωμο"),
    (1290, Gender.UNISEX, "Βραχιόλι Δερμάτινο Θρησκευτικό"),
)


def parse_sku(sku: str) -> tuple[Gender, str]:
    """
    Gender and category implied by a master SKU's prefix.

    DA/SK/MN/BR are the women's line, CR/RN/PN the men's, STX parts are
    unisex and XR bracelets are split by number band.

    Example:
        parse_sku("DA050")   # (Gender.WOMEN, "Δαχτυλίδι")
        parse_sku("XR650")   # (Gender.UNISEX, "Βραχιόλι με Πέτρες")
    """
    sku = (sku or "").strip().upper()
    prefix = sku[:2]

    if sku.startswith("STX"):
        return Gender.UNISEX, "Εξάρτημα (STX)"

    if prefix == "XR":
        digits = "".join(c for c in sku if c in "0123456789")
        if digits:
            number = int(digits)
            for last, gender, category in XR_BANDS:
                if number <= last:
                    return gender, category
            return Gender.MEN, "Βραχιόλι"

    if prefix in PREFIX_CATEGORIES:
        return PREFIX_CATEGORIES[prefix]
    return Gender.UNISEX, "Σταυρός" if prefix == "ST" else "Γενικό"
