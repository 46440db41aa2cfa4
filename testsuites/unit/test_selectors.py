import pytest

from testsuites.ui_testing.framework.selectors import LogicalElement, SelectorCatalog
from testsuites.ui_testing.pages.selectors import HEADER, LIVE_PAGE, SPORT_PAGE


def test_single_selector_becomes_one_candidate():
    element = LogicalElement("login_button", "[data-testid='login-button']")
    assert element.candidates == ("[data-testid='login-button']",)
    assert element.primary == "[data-testid='login-button']"
    assert len(element) == 1


def test_empty_candidates_rejected():
    with pytest.raises(ValueError):
        LogicalElement("nothing", [])
    with pytest.raises(ValueError):
        LogicalElement("blank", ["", ""])


def test_with_fallbacks_keeps_order():
    element = LogicalElement("search", ["#search"]).with_fallbacks(".search-icon", "text=Caută")
    assert element.candidates == ("#search", ".search-icon", "text=Caută")


def test_catalog_lookup_and_missing_name():
    catalog = SelectorCatalog("demo", {"a": ["#a", ".a"], "b": "#b"})
    assert "a" in catalog
    assert catalog.get("a").candidates == ("#a", ".a")
    assert catalog.names() == ["a", "b"]

    with pytest.raises(KeyError) as exc:
        catalog.get("missing")
    assert "missing" in str(exc.value)
    assert "demo" in str(exc.value)


def test_register_replaces_and_merged_overrides():
    base = SelectorCatalog("base", {"a": "#a", "b": "#b"})
    base.register("a", ["#a2", "#a"])
    assert base.get("a").primary == "#a2"

    override = SelectorCatalog("override", {"b": "#b-new", "c": "#c"})
    merged = base.merged(override)
    assert merged.get("b").primary == "#b-new"
    assert len(merged) == 3
    # Originals untouched
    assert base.get("b").primary == "#b"


def test_site_catalogs_have_fallbacks():
    for catalog in (HEADER, SPORT_PAGE, LIVE_PAGE):
        for element in catalog:
            assert len(element) >= 2, f"{catalog.name}.{element.name} has no fallback"
