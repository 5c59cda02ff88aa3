import pytest

from custom_components.lcmenu.menu import MenuDay, MenuItem, ParseError
from tests.helpers.fakes import load_fixture, make_payload, make_service


def _parse(data):
    service, _ = make_service()
    return service.parseRawMealData(data)


def test_single_recipe_scenario():
    days = _parse(make_payload({"01/01/2024": [("Entrees", "Pizza")]}))

    assert days == [
        MenuDay(
            date="01/01/2024",
            menu_name="Lunch",
            items=[MenuItem(category_name="Entrees", food_name="Pizza", menu_name="Lunch")],
        )
    ]


def test_same_day_and_session_is_merged():
    days = _parse(make_payload({"01/01/2024": [("Entrees", "Pizza"), ("Entrees", "Burger")]}))

    assert len(days) == 1
    assert [i.food_name for i in days[0].items] == ["Pizza", "Burger"]


def test_categories_stay_on_one_day():
    days = _parse(make_payload({"01/01/2024": [("Entrees", "Pizza"), ("Sides", "Carrots")]}))

    assert len(days) == 1
    assert [i.category_name for i in days[0].items] == ["Entrees", "Sides"]


def test_fixture_groups_by_date_and_session():
    days = _parse(load_fixture())

    assert [(d.date, d.menu_name) for d in days] == [
        ("1/6/2025", "Breakfast"),
        ("1/6/2025", "Lunch"),
        ("1/7/2025", "Lunch"),
    ]

    # second plan of the lunch session merges into the existing day
    lunch = days[1]
    assert [i.food_name for i in lunch.items] == [
        "Cheese Pizza",
        "Chicken Nuggets",
        "Steamed Broccoli",
        "Turkey Sandwich",
    ]


def test_item_menu_name_mirrors_day():
    for day in _parse(load_fixture()):
        assert all(item.menu_name == day.menu_name for item in day.items)


def test_no_duplicate_days():
    days = _parse(load_fixture())
    keys = [(d.date, d.menu_name) for d in days]
    assert len(keys) == len(set(keys))


def test_session_defaults():
    data = {
        "FamilyMenuSessions": [
            {
                "MenuPlans": [{"Days": [{"Date": "02/03/2024", "MenuMeals": [
                    {"RecipeCategories": [{"CategoryName": "Entrees", "Recipes": [{"RecipeName": "Soup"}]}]}
                ]}]}]
            }
        ]
    }

    days = _parse(data)

    assert days[0].menu_name == "Lunch"
    assert days[0].items[0].menu_name == "Lunch"


def test_sessions_with_same_name_share_days():
    first = make_payload({"01/01/2024": [("Entrees", "Pizza")]}, session_id="a")
    second = make_payload({"01/01/2024": [("Sides", "Corn")]}, session_id="b")
    data = {"FamilyMenuSessions": first["FamilyMenuSessions"] + second["FamilyMenuSessions"]}

    days = _parse(data)

    assert len(days) == 1
    assert [i.food_name for i in days[0].items] == ["Pizza", "Corn"]


@pytest.mark.parametrize("data", [None, {}, {"Other": []}, {"FamilyMenuSessions": []}])
def test_missing_sessions_is_empty(data):
    assert _parse(data) == []


def test_missing_inner_levels_are_skipped():
    data = {
        "FamilyMenuSessions": [
            {"ServingSession": "Lunch"},
            {"ServingSession": "Lunch", "MenuPlans": [{}]},
            {"ServingSession": "Lunch", "MenuPlans": [{"Days": [{"Date": "01/02/2024"}]}]},
            {"ServingSession": "Lunch", "MenuPlans": [{"Days": [{"Date": "01/02/2024", "MenuMeals": [{}]}]}]},
            {"ServingSession": "Lunch", "MenuPlans": [{"Days": [{"Date": "01/02/2024", "MenuMeals": [
                {"RecipeCategories": [{"CategoryName": "Entrees"}]}
            ]}]}]},
        ]
    }

    assert _parse(data) == []


def test_malformed_records_are_skipped():
    data = make_payload({"01/01/2024": [("Entrees", "Pizza")]})
    session = data["FamilyMenuSessions"][0]
    day = session["MenuPlans"][0]["Days"][0]
    day["MenuMeals"][0]["RecipeCategories"][0]["Recipes"] += ["junk", {"NoName": True}]
    session["MenuPlans"][0]["Days"] += ["junk", {"MenuMeals": []}]
    data["FamilyMenuSessions"].insert(0, "junk")

    days = _parse(data)

    assert len(days) == 1
    assert [i.food_name for i in days[0].items] == ["Pizza"]


@pytest.mark.parametrize("data", ["<html>error</html>", [1, 2], {"FamilyMenuSessions": {"a": 1}}])
def test_untraversable_payload_raises(data):
    service, _ = make_service()

    with pytest.raises(ParseError, match="Failed to parse menu data") as info:
        service.parseRawMealData(data)

    assert info.value.__cause__ is None
    assert "error" in service.log.levels()


def test_menu_item_is_immutable():
    item = MenuItem(category_name="Entrees", food_name="Pizza", menu_name="Lunch")

    with pytest.raises(AttributeError):
        item.food_name = "Salad"
