# catalog_sheets/schema/properties.py
# --------------------------------------------------------------------------------------
# LEGAL tab (row per property: A = property name, B.. = allowed values) and the
# PROPERTIES tab (A = property name, B = section) → property definitions + legal values.
# --------------------------------------------------------------------------------------
from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from catalog_sheets.schema.util import cell

DEFAULT_SECTION = "Specifications"
FREE_TEXT_UNIT = "mm"

_NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]+")

LegalRow = Tuple[str, List[str]]


def property_key(name: str) -> str:
    """
    camelCase form key for a property name.

        "Beam Angle"          → "beamAngle"
        "IP Rating"           → "ipRating"
        "Colour #1"           → "colour1"

    Different names can collapse to the same key ("IP-Rating" / "IP Rating");
    callers get both definitions back unchanged.
    """
    words = _NON_ALNUM_RE.sub(" ", name or "").strip().lower().split()
    if not words:
        return ""
    return words[0] + "".join(w[:1].upper() + w[1:] for w in words[1:])


def parse_legal_rows(rows: Sequence[Sequence[Any]]) -> List[LegalRow]:
    """(property name, allowed values) per LEGAL row; header skipped."""
    out: List[LegalRow] = []
    for row in rows[1:]:
        name = cell(row, 0)
        if not name:
            continue
        values = [str(v).strip() for v in row[1:] if v is not None and str(v).strip()]
        out.append((name, values))
    return out


def section_map(rows: Sequence[Sequence[Any]]) -> Dict[str, str]:
    sections: Dict[str, str] = {}
    for row in rows[1:]:
        name, section = cell(row, 0), cell(row, 1)
        if name and section:
            sections[name] = section
    return sections


def derive_properties(
    legal_rows: Sequence[LegalRow],
    sections: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, Any]]:
    """
    One definition per LEGAL row. Allowed values present → dropdown with no unit;
    none → free text with an "mm" unit suffix.
    """
    sections = sections or {}
    props: List[Dict[str, Any]] = []
    for name, values in legal_rows:
        prop: Dict[str, Any] = {
            "name": name,
            "key": property_key(name),
            "inputType": "dropdown" if values else "text",
            "section": sections.get(name, DEFAULT_SECTION),
        }
        if not values:
            prop["unitSuffix"] = FREE_TEXT_UNIT
        props.append(prop)
    return props


def legal_values(legal_rows: Sequence[LegalRow]) -> List[Dict[str, str]]:
    return [
        {"propertyName": name, "allowedValue": value}
        for name, values in legal_rows
        for value in values
    ]
