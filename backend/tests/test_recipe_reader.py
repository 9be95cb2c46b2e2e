"""Tests for listing, lookup and search."""

import pytest

from recipebook.errors import InvalidPageRequest, NotFoundError
from recipebook.services.catalog import (
    Page,
    create_recipe,
    get_recipe,
    list_by_category,
    list_by_owner,
    list_latest,
    search,
)
from recipebook.storage.models import User


def add_recipe(session, title, *, category="Dinner", ingredients=("Salt",), instructions="Cook it", username="chef1"):
    return create_recipe(
        session,
        title=title,
        prep_time=5,
        cook_time=10,
        difficulty="Medium",
        instructions=instructions,
        ingredient_names=list(ingredients),
        quantities=["1"] * len(ingredients),
        units=["pinch"] * len(ingredients),
        category_name=category,
        username=username,
    )


@pytest.fixture(name="catalog")
def catalog_fixture(session, chef, other_chef, blob_store):
    """Five recipes across two owners; returns ids oldest first."""
    return [
        add_recipe(session, "Pancakes", category="Breakfast", ingredients=("Flour", "Milk", "Eggs")),
        add_recipe(session, "Caesar Salad", category="Salad", ingredients=("Romaine", "Parmesan")),
        add_recipe(
            session,
            "Brownies",
            category="Dessert",
            ingredients=("Brown Sugar", "Sugar", "Cocoa"),
            instructions="Bake at 180C until set",
        ),
        add_recipe(session, "Tomato Soup", category="Lunch", ingredients=("Tomato",), username="chef2"),
        add_recipe(session, "Roast Chicken", category="Dinner", ingredients=("Chicken", "Salt"), username="chef2"),
    ]


def test_latest_on_empty_store_is_empty_list(session):
    assert list_latest(session) == []


def test_latest_unpaged_is_newest_first(session, catalog):
    assert [r.id for r in list_latest(session)] == list(reversed(catalog))


def test_latest_paged(session, catalog):
    first = list_latest(session, page=0, size=2)
    assert isinstance(first, Page)
    assert [r.id for r in first.items] == [catalog[4], catalog[3]]
    assert first.total == 5
    assert first.total_pages == 3
    assert first.has_next and not first.has_previous

    last = list_latest(session, page=2, size=2)
    assert [r.id for r in last.items] == [catalog[0]]
    assert last.has_previous and not last.has_next

    beyond = list_latest(session, page=9, size=2)
    assert beyond.items == []
    assert beyond.total == 5


@pytest.mark.parametrize("page, size", [(-1, 2), (0, 0), (0, -5)])
def test_invalid_page_requests(session, page, size):
    with pytest.raises(InvalidPageRequest):
        list_latest(session, page=page, size=size)
    with pytest.raises(InvalidPageRequest):
        search(session, "soup", page=page, size=size)
    with pytest.raises(InvalidPageRequest):
        search(session, None, page=page, size=size)


def test_get_recipe_missing(session):
    with pytest.raises(NotFoundError):
        get_recipe(session, None)
    with pytest.raises(NotFoundError):
        get_recipe(session, 12345)


def test_by_category_normalizes_input(session, catalog):
    assert [r.title for r in list_by_category(session, "Breakfast")] == ["Pancakes"]
    assert [r.title for r in list_by_category(session, "  dessert ")] == ["Brownies"]
    assert list_by_category(session, "Zorbian") == []


@pytest.mark.parametrize("name", [None, "", "   \t"])
def test_by_category_blank_is_empty(session, catalog, name):
    assert list_by_category(session, name) == []


def test_by_owner(session, catalog, chef, other_chef):
    assert [r.id for r in list_by_owner(session, chef)] == [catalog[2], catalog[1], catalog[0]]
    assert [r.id for r in list_by_owner(session, other_chef)] == [catalog[4], catalog[3]]


def test_by_owner_without_identity_is_empty(session, catalog):
    ghost = User(username="ghost", email="ghost@example.com", password_hash="x", first_name="G", last_name="H")
    assert list_by_owner(session, ghost) == []
    assert list_by_owner(session, None) == []


@pytest.mark.parametrize("query", [None, "", "   "])
def test_blank_search_matches_latest(session, catalog, query):
    result = search(session, query, page=1, size=2)
    latest = list_latest(session, page=1, size=2)
    assert [r.id for r in result.items] == [r.id for r in latest.items]
    assert result.total == latest.total == 5


def test_search_by_title_is_case_insensitive(session, catalog):
    result = search(session, "tomato SOUP", page=0, size=10)
    assert [r.title for r in result.items] == ["Tomato Soup"]


def test_search_by_instructions(session, catalog):
    assert [r.title for r in search(session, "180c", page=0, size=10).items] == ["Brownies"]


def test_search_by_category(session, catalog):
    assert [r.title for r in search(session, "salad", page=0, size=10).items] == ["Caesar Salad"]
    assert [r.title for r in search(session, "breakfast", page=0, size=10).items] == ["Pancakes"]


def test_search_by_ingredient(session, catalog):
    result = search(session, "milk", page=0, size=10)
    assert [r.title for r in result.items] == ["Pancakes"]


def test_search_deduplicates_multi_ingredient_matches(session, catalog):
    result = search(session, "sugar", page=0, size=10)
    assert [r.title for r in result.items] == ["Brownies"]
    assert result.total == 1


def test_search_results_are_paginated(session, catalog):
    # every recipe has an "a" somewhere
    result = search(session, "a", page=0, size=2)
    assert len(result.items) == 2
    assert result.total == 5
    assert result.items[0].id == catalog[4]


@pytest.mark.parametrize(
    "query",
    ["🍰", "' OR 1=1 --", "'; DROP TABLE recipe; --", "%", "_", "\\", "100%_\\x", "ñandú"],
)
def test_hostile_or_exotic_queries_never_fail(session, catalog, query):
    result = search(session, query, page=0, size=10)
    assert result.items == []
    assert result.total == 0
    assert len(list_latest(session)) == 5


def test_search_finds_emoji_titles(session, chef, blob_store):
    add_recipe(session, "Birthday Cake 🍰", category="Dessert")
    add_recipe(session, "Plain Cake", category="Dessert")
    assert [r.title for r in search(session, "🍰", page=0, size=5).items] == ["Birthday Cake 🍰"]


@pytest.mark.parametrize("query", ["éclair", "ÉCLAIR", "Éclair", "clai"])
def test_search_folds_non_ascii_case(session, chef, blob_store, query):
    add_recipe(session, "ÉCLAIR", category="Dessert")
    add_recipe(session, "Crème Brûlée", category="Dessert", ingredients=("Crème Fraîche",))
    assert [r.title for r in search(session, query, page=0, size=5).items] == ["ÉCLAIR"]


def test_search_non_ascii_ingredient_any_case(session, chef, blob_store):
    add_recipe(session, "Crème Brûlée", category="Dessert", ingredients=("Crème Fraîche",))
    assert search(session, "CRÈME FRAÎCHE", page=0, size=5).total == 1
