import pytest

from whiskey_recs.analytics.store import EventLog
from whiskey_recs.catalog.data_store import CatalogStore
from whiskey_recs.catalog.models import InteractionHistory, User, Whiskey
from whiskey_recs.errors import EmptyResultError, NotFoundError
from whiskey_recs.profiles.preferences import dislike_whiskey
from whiskey_recs.query.models import StructuredHints
from whiskey_recs.recommendations.config import ScoringConfig
from whiskey_recs.recommendations.explain import build_reason
from whiskey_recs.recommendations.models import WhiskeyFilters
from whiskey_recs.recommendations.retrieval import recommend


def _ids(recs):
    return [r.whiskey.id for r in recs]


# ── recommend() ──────────────────────────────────────────────────────────


def test_empty_query_returns_top_three_by_rating(store):
    recs = recommend(store, "")
    assert _ids(recs) == ["w003", "w006", "w001"]


def test_never_more_than_top_n(store):
    assert len(recommend(store, "fruity")) <= 3
    assert len(recommend(store, "fruity", config=ScoringConfig(top_n=1))) == 1


def test_price_hint(store):
    assert _ids(recommend(store, "under 10만원")) == ["w002", "w007", "w005"]


def test_high_end_hint(store):
    assert _ids(recommend(store, "something premium")) == ["w003", "w006"]


def test_beginner_hint(store):
    assert _ids(recommend(store, "for a beginner")) == ["w002", "w005"]


def test_hints_are_conjunctive(store):
    with pytest.raises(EmptyResultError):
        recommend(store, "a peaty bourbon")


def test_explicit_filters_apply(store):
    recs = recommend(store, "", filters=WhiskeyFilters(country="USA"))
    assert _ids(recs) == ["w007"]


def test_name_tie_break(store):
    recs = recommend(store, "", config=ScoringConfig(tie_break="name"))
    assert _ids(recs) == ["w004", "w002", "w005"]


def test_rating_outranks_liked_flavors(store):
    # user001 likes Laphroaig and shops between 50k and 200k
    recs = recommend(store, "", user_id="user001")
    assert _ids(recs) == ["w006", "w001", "w004"]
    assert [r.liked_overlap for r in recs] == [0, 4, 0]


def test_liked_flavors_break_rating_ties():
    store = CatalogStore(
        [
            Whiskey(id="a", name="A", category="other", price=1, average_rating=4.0, flavor_tags=("honey",)),
            Whiskey(id="b", name="B", category="other", price=1, average_rating=4.0, flavor_tags=("peat",)),
            Whiskey(id="c", name="C", category="other", price=1, average_rating=3.0, flavor_tags=("peat",)),
        ],
        users=[User(id="u1", username="peat_head", history=InteractionHistory(liked=frozenset({"c"})))],
    )
    recs = recommend(store, "", user_id="u1")
    assert _ids(recs) == ["b", "a", "c"]


def test_age_statement_is_not_a_price(store):
    recs = recommend(store, "a scotch under 18 years old")
    assert _ids(recs) == ["w003", "w006", "w001"]


def test_disliked_whiskey_is_never_returned(store):
    assert _ids(recommend(store, "single malt", user_id="user001"))[0] == "w001"

    dislike_whiskey(store, "user001", "w001")
    recs = recommend(store, "single malt", user_id="user001")

    assert "w001" not in _ids(recs)
    assert _ids(recs) == ["w004", "w005"]


def test_preferred_price_window_and_overlap(store):
    dislike_whiskey(store, "user002", "w005")
    recs = recommend(store, "fruity", user_id="user002")
    assert _ids(recs) == ["w002", "w007"]
    assert [r.liked_overlap for r in recs] == [4, 1]


def test_unknown_user(store):
    with pytest.raises(NotFoundError):
        recommend(store, "smoky", user_id="ghost")


def test_custom_classifier_is_used(store):
    recs = recommend(store, "anything", classifier=lambda _: StructuredHints(flavor_keywords={"peat"}))
    assert _ids(recs) == ["w001"]


def test_records_analytics_event(store):
    events = EventLog()
    recommend(store, "smoky single malt", user_id="user001", events=events)
    (event,) = events.get_events("recommend")
    assert event["results"] == ["w001"]
    assert event["flavor_keywords"] == ["smoky"]
    assert event["category"] == "single_malt"


def test_every_pick_has_a_reason(store):
    for rec in recommend(store, "fruity", user_id="user003"):
        assert rec.reason.startswith(rec.whiskey.name + ":")


# ── build_reason() ───────────────────────────────────────────────────────


def test_reason_names_sweet_tags(store):
    reason = build_reason(store.get_whiskey("w002"), "something sweet")
    assert reason.startswith("Ballantine's 17: A blended Scotch with a smooth finish and a balanced palate.")
    assert "honey, vanilla and fruit" in reason


def test_reason_smoky_cue(store):
    reason = build_reason(store.get_whiskey("w001"), "smoky please")
    assert "peat and smoky" in reason


def test_reason_high_end_only_above_floor(store):
    assert "high-end" in build_reason(store.get_whiskey("w003"), "premium bottle")
    assert "high-end" not in build_reason(store.get_whiskey("w005"), "premium bottle")


def test_reason_uses_user_profile(store):
    reason = build_reason(store.get_whiskey("w002"), "", user=store.get_user("user002"))
    assert "new to whiskey" in reason
    assert "honey and vanilla" in reason
    assert "(0 won to 100,000 won)" in reason


def test_reason_without_cues_is_just_the_summary(store):
    reason = build_reason(store.get_whiskey("w007"), "hello")
    assert reason == "Maker's Mark: A wheated bourbon that drinks soft and sweet."
