#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
    tests.test_catalog
    ~~~~~~~~~~~~~~~~~~

    Token resolution, the borrow cart and catalog management.
"""

import json
import pytest
from meeple.core.catalog import Catalog, INITIAL_GAMES
from meeple.core.exceptions import ItemNotFoundError
from meeple.schemas.catalog import CatalogItemIn


def test_resolve_by_barcode(catalog):
    assert catalog.resolve("007").name == "Catan"


def test_barcode_beats_name():
    catalog = Catalog([
        {"id": 1, "name": "123"},
        {"id": 2, "name": "Catan", "barcode": "123"},
    ])
    assert catalog.resolve("123").id == 2


def test_resolve_by_name_ignores_case_and_whitespace(catalog):
    assert catalog.resolve("  cAtAn ").id == 1


def test_resolve_thai_layout_scan(catalog):
    assert catalog.resolve("ฉฟะฟื").id == 1
    # barcode 009 typed on the Thai layout
    assert catalog.resolve("จจต").id == 2


def test_resolve_unknown_token(catalog):
    with pytest.raises(ItemNotFoundError) as excinfo:
        catalog.resolve("Monopoly")
    assert excinfo.value.token == "Monopoly"


def test_resolve_blank_token(catalog):
    with pytest.raises(ItemNotFoundError):
        catalog.resolve("   ")


def test_search_and_popular():
    catalog = Catalog()
    assert [i.name for i in catalog.search("co")] == ["Codenames"]
    assert {i.name for i in catalog.popular()} == {"Catan", "Ticket to Ride"}
    assert len(catalog.search()) == len(INITIAL_GAMES)


def test_cart(catalog):
    catalog.toggle_select(1)
    catalog.select(3)
    assert [i.id for i in catalog.selected] == [1, 3]
    catalog.toggle_select(1)
    assert [i.id for i in catalog.selected] == [3]
    catalog.clear_selection()
    assert catalog.selected == []


def test_add_assigns_next_id(catalog):
    item = catalog.add(CatalogItemIn(name="Azul", barcode="012"))
    assert item.id == 4
    assert catalog.resolve("012") is item
    assert Catalog([]).next_id() == 1


def test_update_keeps_id_and_selection(catalog):
    catalog.select(2)
    item = catalog.update(2, CatalogItemIn(name="Codenames Duet"))
    assert item.id == 2 and item.selected
    assert catalog.get(2).name == "Codenames Duet"


def test_delete(catalog):
    assert catalog.delete([1, 3, 99]) == 2
    assert [i.id for i in catalog] == [2]
    with pytest.raises(ItemNotFoundError):
        catalog.get(1)


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        Catalog([{"id": 1, "name": "A"}, {"id": 1, "name": "B"}])


def test_cache_round_trip_drops_selection(tmp_path):
    path = str(tmp_path / "cache" / "catalog.json")
    catalog = Catalog.load(path)
    catalog.select(1)
    catalog.add(CatalogItemIn(name="Azul"))

    with open(path, encoding="utf-8") as fp:
        saved = json.load(fp)
    assert "selected" not in saved[0]
    assert saved[-1]["name"] == "Azul"
    assert "imageUrl" in saved[-1]

    reloaded = Catalog.load(path)
    assert reloaded.by_name("azul") is not None
    assert reloaded.selected == []


def test_corrupt_cache_falls_back_to_defaults(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text("{not json", encoding="utf-8")
    assert len(Catalog.load(str(path))) == len(INITIAL_GAMES)


def test_reset(tmp_path):
    path = tmp_path / "catalog.json"
    catalog = Catalog.load(str(path))
    catalog.delete([1, 2, 3])
    assert path.exists()
    catalog.reset()
    assert not path.exists()
    assert len(catalog) == len(INITIAL_GAMES)
