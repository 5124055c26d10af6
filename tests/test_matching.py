import pytest
from pymongo.errors import ServerSelectionTimeoutError

import matching
from matching import (
    filter_mutual,
    is_reciprocal,
    match_cards,
    matched_user_ids,
    resolve_mutual_matches,
)


@pytest.fixture
def triangle(make_user):
    # A likes B, B likes A and C, C likes nobody
    make_user("a", matches=["b"], first_name="Ann")
    make_user("b", matches=["a", "c"], first_name="Bo", url="http://img/b.jpg")
    make_user("c", matches=[], first_name="Cy")


def test_matched_user_ids_keeps_record_order():
    records = [{"user_id": "z"}, {"user_id": "a"}, {"user_id": "z"}]
    assert matched_user_ids(records) == ["z", "a", "z"]


def test_matched_user_ids_of_nothing():
    assert matched_user_ids(None) == []
    assert matched_user_ids([]) == []


def test_is_reciprocal():
    profile = {"user_id": "b", "matches": [{"user_id": "c"}, {"user_id": "a"}]}
    assert is_reciprocal(profile, "a")
    assert not is_reciprocal(profile, "d")
    assert not is_reciprocal({"user_id": "e"}, "a")


def test_filter_mutual_drops_one_sided_profiles():
    profiles = [
        {"user_id": "b", "matches": [{"user_id": "a"}]},
        {"user_id": "c", "matches": []},
        {"user_id": "d", "matches": [{"user_id": "x"}]},
    ]
    assert [p["user_id"] for p in filter_mutual("a", profiles)] == ["b"]


def test_resolve_returns_reciprocal_match(db, triangle):
    result = resolve_mutual_matches(db, "a", [{"user_id": "b"}])
    assert [p["user_id"] for p in result] == ["b"]
    assert "hashed_password" not in result[0]
    assert "_id" not in result[0]


def test_resolve_ignores_one_sided_interest(db, triangle):
    # B lists C, but C never matched B back
    assert resolve_mutual_matches(db, "c", []) == []
    result = resolve_mutual_matches(db, "b", [{"user_id": "a"}, {"user_id": "c"}])
    assert [p["user_id"] for p in result] == ["a"]


def test_resolve_empty_records_skips_the_store():
    # a None database would fail on any query
    assert resolve_mutual_matches(None, "a", []) == []
    assert resolve_mutual_matches(None, "a", None) == []


def test_resolve_unknown_targets(db, triangle):
    assert resolve_mutual_matches(db, "a", [{"user_id": "ghost"}]) == []


def test_resolve_propagates_store_failure(db, monkeypatch):
    def boom(db, ids):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(matching, "find_users_by_ids", boom)
    with pytest.raises(ServerSelectionTimeoutError):
        resolve_mutual_matches(db, "a", [{"user_id": "b"}])


def test_match_cards():
    cards = match_cards([{"user_id": "b", "first_name": "Bo", "url": "http://img/b.jpg", "matches": []}])
    assert cards == [{
        "user_id": "b",
        "first_name": "Bo",
        "url": "http://img/b.jpg",
        "alt": "Bo profile",
    }]


def test_match_cards_without_a_name():
    cards = match_cards([{"user_id": "b", "matches": []}])
    assert cards[0]["alt"] == "profile"
    assert cards[0]["first_name"] is None
