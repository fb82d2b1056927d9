"""Pure normalization helpers shared by request schemas and the CSV importer.

Nothing in this module touches the database or the request objects, so the
same rules apply whether a value comes from a JSON body or a CSV row.
"""

import math
import re
import unicodedata
from typing import Dict, Iterable, List, Optional, Tuple

RISK_LEVELS = ("LOW", "MEDIUM", "HIGH")

HIGH_RISK_KEYWORDS = (
    "opioid",
    "narcotic",
    "schedule",
    "controlled",
    "psychotropic",
    "restricted",
)

# Logical column -> accepted header spellings (compared after normalize_header)
COLUMN_ALIASES: Dict[str, Tuple[str, ...]] = {
    "registration_number": (
        "registration number",
        "registration no",
        "reg no",
        "reg number",
        "registration",
        "registration code",
    ),
    "brand_name": ("brand name", "brand", "trade name", "product name", "proprietary name"),
    "generic_name": ("generic name", "generic", "inn", "active ingredient", "active ingredients", "molecule"),
    "strength": ("strength", "dose", "dosage strength", "concentration"),
    "dosage_form": ("dosage form", "form", "pharmaceutical form", "formulation"),
    "pack_size": ("pack size", "package size", "pack"),
    "packaging_type": ("packaging type", "packaging", "package type", "primary packaging"),
    "shelf_life": ("shelf life", "shelf life months", "shelflife"),
    "category": ("category", "therapeutic category", "therapeutic class", "class", "atc class"),
    "risk_level": ("risk level", "risk", "risk category", "risk class"),
    "manufacturer": ("manufacturer", "manufacturer name", "manufactured by"),
    "manufacturer_address": ("manufacturer address", "address of manufacturer", "manufacturing site address"),
    "manufacturer_country": ("manufacturer country", "country of manufacture", "country", "country of origin"),
    "marketing_authorization_holder": (
        "marketing authorization holder",
        "marketing authorisation holder",
        "mah",
        "license holder",
    ),
    "local_technical_representative": (
        "local technical representative",
        "ltr",
        "local representative",
    ),
    "disposal_instructions": ("disposal instructions", "disposal", "disposal method"),
}

REQUIRED_COLUMNS: Tuple[str, ...] = (
    "registration_number",
    "brand_name",
    "generic_name",
    "strength",
    "dosage_form",
)


def normalize_header(name: Optional[str]) -> str:
    """Lowercase, strip accents and collapse punctuation to single spaces.

    >>> normalize_header("  Registration N°. ")
    'registration n'
    """
    if not name:
        return ""
    decomposed = unicodedata.normalize("NFKD", name)
    ascii_only = "".join(c for c in decomposed if not unicodedata.combining(c))
    ascii_only = ascii_only.encode("ascii", "ignore").decode("ascii").lower()
    return re.sub(r"[^a-z0-9]+", " ", ascii_only).strip()


def resolve_columns(headers: Iterable[str]) -> Dict[str, str]:
    """Map each logical column to the first matching header of the file."""
    lookup: Dict[str, str] = {}
    for header in headers:
        key = normalize_header(header)
        if key and key not in lookup:
            lookup[key] = header

    resolved: Dict[str, str] = {}
    for logical, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            header = lookup.get(normalize_header(alias))
            if header is not None:
                resolved[logical] = header
                break
    return resolved


def missing_required_columns(resolved: Dict[str, str]) -> List[str]:
    return [column for column in REQUIRED_COLUMNS if column not in resolved]


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_risk_level(value: Optional[str]) -> Optional[str]:
    """Return LOW/MEDIUM/HIGH for any casing of a known level.

    Blank input yields None; anything else raises ValueError.
    """
    text = clean_text(value)
    if text is None:
        return None
    upper = text.upper()
    if upper == "MED":
        return "MEDIUM"
    if upper not in RISK_LEVELS:
        raise ValueError(f"Risk level must be one of {list(RISK_LEVELS)}")
    return upper


def explicit_risk_level(value: Optional[str]) -> Optional[str]:
    """Read a free-text risk column, returning a level only when unambiguous."""
    text = clean_text(value)
    if text is None:
        return None
    upper = text.upper()
    found = []
    if "HIGH" in upper:
        found.append("HIGH")
    if "LOW" in upper:
        found.append("LOW")
    if "MED" in upper:
        found.append("MEDIUM")
    if len(found) == 1:
        return found[0]
    return None


def infer_risk_level(explicit: Optional[str], category: Optional[str]) -> str:
    level = explicit_risk_level(explicit)
    if level:
        return level
    haystack = (category or "").lower()
    if any(keyword in haystack for keyword in HIGH_RISK_KEYWORDS):
        return "HIGH"
    return "MEDIUM"


def clamp_confidence(value: Optional[float]) -> Optional[float]:
    """Clamp a model score into [0, 1]; None and NaN stay unset."""
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return max(0.0, min(1.0, number))


def initials(name: str) -> str:
    return "".join(part[0] for part in name.split() if part).upper()
