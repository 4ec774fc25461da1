import pytest

from catalog_sheets.google.ranges import a1, column_letter
from catalog_sheets.schema.catalog import parse_brands, parse_products, parse_visibility
from catalog_sheets.schema.categories import build_category_tree, category_paths, tree_to_paths
from catalog_sheets.schema.filters import category_filter_map, filter_default_map
from catalog_sheets.schema.properties import (
    derive_properties,
    legal_values,
    parse_legal_rows,
    property_key,
    section_map,
)


# ---- ranges ----

@pytest.mark.parametrize("idx,letters", [(0, "A"), (1, "B"), (25, "Z"), (26, "AA"), (27, "AB"), (51, "AZ"), (52, "BA"), (701, "ZZ"), (702, "AAA")])
def test_column_letter(idx, letters):
    assert column_letter(idx) == letters


def test_column_letter_rejects_negative():
    with pytest.raises(ValueError):
        column_letter(-1)


def test_a1_quotes_tab_names():
    assert a1("PRODUCTS TO DO", "A:D") == "'PRODUCTS TO DO'!A:D"
    assert a1("Eran's tab", "A2") == "'Eran''s tab'!A2"


# ---- categories ----

def test_build_category_tree_shares_prefixes():
    tree = build_category_tree([
        "Indoor Lights/Ceiling Lights/Downlights",
        "Indoor Lights / Ceiling Lights / Pendants",
        "Outdoor Lights/Wall Lights",
    ])
    assert tree == [
        {"name": "Indoor Lights", "children": [
            {"name": "Ceiling Lights", "children": [
                {"name": "Downlights"},
                {"name": "Pendants"},
            ]},
        ]},
        {"name": "Outdoor Lights", "children": [{"name": "Wall Lights"}]},
    ]


def test_leaves_have_no_children_key():
    tree = build_category_tree(["A/B"])
    leaf = tree[0]["children"][0]
    assert "children" not in leaf


def test_same_name_leaf_and_branch_at_different_positions():
    tree = build_category_tree(["Lights/Spot", "Spot/Mini"])
    assert tree[0]["children"] == [{"name": "Spot"}]
    assert tree[1] == {"name": "Spot", "children": [{"name": "Mini"}]}


def test_empty_segments_are_dropped():
    assert build_category_tree(["//A//B/", "  ", ""]) == [{"name": "A", "children": [{"name": "B"}]}]


def test_tree_round_trip():
    paths = [
        "Indoor Lights/Ceiling Lights/Downlights",
        "Indoor Lights/Ceiling Lights/Pendants",
        "Indoor Lights/Lamps",
        "Outdoor Lights/Wall Lights",
        " Fans / Ceiling Fans ",
    ]
    expected = {"/".join(s.strip() for s in p.split("/") if s.strip()) for p in paths}
    assert set(tree_to_paths(build_category_tree(paths))) == expected


def test_category_paths_skips_header_and_blanks():
    rows = [["Path"], ["  A/B  "], [], [""], ["C"]]
    assert category_paths(rows) == ["A/B", "C"]
    assert category_paths([["Path"]]) == []
    assert category_paths([]) == []


# ---- properties ----

@pytest.mark.parametrize("name,key", [
    ("Beam Angle", "beamAngle"),
    ("IP Rating", "ipRating"),
    ("Low Voltage Options", "lowVoltageOptions"),
    ("Colour #1", "colour1"),
    ("  Cutout -- Size (mm) ", "cutoutSizeMm"),
    ("", ""),
])
def test_property_key(name, key):
    assert property_key(name) == key


def test_property_key_collisions_are_kept():
    rows = parse_legal_rows([["Property"], ["IP Rating", "IP44"], ["IP-Rating", "IP65"]])
    props = derive_properties(rows)
    assert [p["key"] for p in props] == ["ipRating", "ipRating"]
    assert [p["name"] for p in props] == ["IP Rating", "IP-Rating"]


def test_derive_properties_dropdown_vs_text(sheet_tabs):
    legal = parse_legal_rows(sheet_tabs["LEGAL"])
    props = derive_properties(legal, section_map(sheet_tabs["PROPERTIES"]))
    by_name = {p["name"]: p for p in props}

    assert by_name["Beam Angle"] == {
        "name": "Beam Angle", "key": "beamAngle", "inputType": "dropdown", "section": "Optical",
    }
    assert by_name["Low Voltage Options"]["inputType"] == "text"
    assert by_name["Low Voltage Options"]["unitSuffix"] == "mm"
    assert by_name["Low Voltage Options"]["section"] == "Specifications"


def test_legal_values_flatten_rows():
    rows = parse_legal_rows([["Property"], ["Dimmable", " Yes ", "", "No"], ["", "stray"]])
    assert legal_values(rows) == [
        {"propertyName": "Dimmable", "allowedValue": "Yes"},
        {"propertyName": "Dimmable", "allowedValue": "No"},
    ]


# ---- filters ----

def test_filter_default_map_skips_unnamed_columns(sheet_tabs):
    assert filter_default_map(sheet_tabs["FILTER DEFAULTS"]) == [
        {"name": "Downlight Filters", "allowedProperties": ["Beam Angle", "Dimmable"]},
        {"name": "Pendant Filters", "allowedProperties": ["Colour #1"]},
    ]
    assert filter_default_map([]) == []


def test_category_filter_map_needs_both_columns(sheet_tabs):
    assert category_filter_map(sheet_tabs["FILTER"]) == [
        {"categoryKeyword": "Downlights", "filterDefault": "Downlight Filters"},
    ]


# ---- products / brands ----

def test_parse_products_keeps_ready_and_visible(sheet_tabs):
    products = parse_products(sheet_tabs["PRODUCTS TO DO"])
    assert [p["sku"] for p in products] == ["LED-DL-001", "LED-WL-001"]
    assert products[0] == {
        "sku": "LED-DL-001", "brand": "Havit", "status": "READY", "visibility": 1, "exampleTitle": "LED-DL-001",
    }


def test_parse_products_short_rows_are_hidden():
    rows = [["SKU"], ["X-1", "Brand", "READY"], ["", "b", "READY", "1"]]
    assert parse_products(rows) == []


@pytest.mark.parametrize("raw,expected", [("1", 1), (" 2 ", 2), ("3 (temp)", 3), ("", 0), ("yes", 0), (None, 0), ("-1", -1)])
def test_parse_visibility(raw, expected):
    assert parse_visibility(raw) == expected


def test_parse_brands_drops_rows_without_brand(sheet_tabs):
    assert parse_brands(sheet_tabs["BRANDS"]) == [
        {"brand": "Havit", "brandName": "Havit Lighting", "website": "https://www.havit.com.au"},
        {"brand": "CLA", "brandName": "CLA Lighting", "website": ""},
    ]
