import pytest

from whiskey_recs.analytics.store import EventLog
from whiskey_recs.errors import EmptyResultError, NotFoundError
from whiskey_recs.profiles.preferences import dislike_whiskey
from whiskey_recs.recommendations.config import ScoringConfig
from whiskey_recs.recommendations.similarity import similar_whiskies, similarity_score

NO_RATING = ScoringConfig(rating_weight=0)


def _ids(items):
    return [s.whiskey.id for s in items]


def test_similar_to_laphroaig_sorted_by_price(store):
    result = similar_whiskies(store, "w001")
    assert _ids(result) == ["w005", "w002", "w004"]


def test_lookup_is_logged(store):
    events = EventLog()
    similar_whiskies(store, "w001", events=events)
    (event,) = events.get_events("similar")
    assert event["reference_id"] == "w001"
    assert event["results"] == ["w005", "w002", "w004"]


def test_scores_clear_threshold_and_reference_excluded(store):
    config = ScoringConfig()
    for whiskey in store.get_all():
        try:
            result = similar_whiskies(store, whiskey.id, config=config)
        except EmptyResultError:
            continue
        assert whiskey.id not in _ids(result)
        assert all(s.score > config.similarity_threshold for s in result)
        assert len(result) <= config.top_n


def test_score_components(store):
    w001, w005 = store.get_whiskey("w001"), store.get_whiskey("w005")
    # same category + price within 50k + (5 - 0.5) * 5
    assert similarity_score(w001, w005) == pytest.approx(20 + 15 + 22.5)
    assert similarity_score(w001, w005, NO_RATING) == 35


def test_score_is_symmetric(store):
    items = store.get_all()
    for a in items:
        for b in items:
            assert similarity_score(a, b) == pytest.approx(similarity_score(b, a))


def test_threshold_is_strict(store):
    hibiki, ballantines = store.get_whiskey("w006"), store.get_whiskey("w002")
    assert similarity_score(hibiki, ballantines, NO_RATING) == 30
    with pytest.raises(EmptyResultError):
        similar_whiskies(store, "w006", config=NO_RATING)


def test_disliked_excluded_for_user(store):
    dislike_whiskey(store, "user001", "w005")
    result = similar_whiskies(store, "w001", user_id="user001")
    assert _ids(result) == ["w002", "w004", "w003"]


def test_unknown_reference(store):
    with pytest.raises(NotFoundError):
        similar_whiskies(store, "w999")


def test_unknown_user(store):
    with pytest.raises(NotFoundError):
        similar_whiskies(store, "w001", user_id="ghost")
