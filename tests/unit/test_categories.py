from checkly.categories import category_name, find_category, sorted_categories
from checkly.core.models import AppState, Category

STATE = AppState(
    version=1,
    categories=(
        Category(id="cat_finance", name="Finance", sort_order=2),
        Category(id="cat_house", name="House", sort_order=1),
    ),
)


def test_sorted_categories():
    assert [c.id for c in sorted_categories(STATE)] == ["cat_house", "cat_finance"]


def test_category_name():
    assert category_name(STATE, "cat_house") == "House"
    assert category_name(STATE, "cat_gone") == "Unknown"


def test_find_category_by_id_or_name():
    assert find_category(STATE, "cat_finance").name == "Finance"
    assert find_category(STATE, " house ").id == "cat_house"
    assert find_category(STATE, "garden") is None
