import pytest

from whiskey_recs.catalog.data_store import CatalogStore, load_whiskies
from whiskey_recs.catalog.config import DEFAULT_CATALOG_CONFIG
from whiskey_recs.catalog.models import TastingNote, User, WhiskeyCategory
from whiskey_recs.catalog.pricing import PriceTier
from whiskey_recs.errors import StorageError


def _note(note_id="tn-x", user_id="user002", whiskey_id="w002", rating=4):
    return TastingNote(
        id=note_id, user_id=user_id, whiskey_id=whiskey_id, rating=rating,
        body=3, richness=3, smokiness=0, sweetness=4, created_at=0.0,
    )


# ── Loading ──────────────────────────────────────────────────────────────


def test_load_whiskies_parses_csv():
    whiskies = load_whiskies(DEFAULT_CATALOG_CONFIG.whiskies_csv)
    assert [w.id for w in whiskies] == ["w001", "w002", "w003", "w004", "w005", "w006", "w007"]

    laphroaig = whiskies[0]
    assert laphroaig.category is WhiskeyCategory.single_malt
    assert laphroaig.flavor_tags == ("peat", "smoky", "iodine", "seaweed")
    assert laphroaig.price == 120_000
    assert laphroaig.price_tier is PriceTier.mid


def test_missing_age_loads_as_none():
    hibiki = next(w for w in load_whiskies(DEFAULT_CATALOG_CONFIG.whiskies_csv) if w.id == "w006")
    assert hibiki.age is None
    assert hibiki.price_tier is PriceTier.high


def test_seeded_store_contents(store):
    assert len(store.get_all()) == 7
    assert store.get_user("user001").note_ids == ("tn001",)
    assert store.get_user_by_username("sherry_cask").id == "user003"
    assert [n.id for n in store.get_notes_by_whiskey("w001")] == ["tn001"]


def test_dataframe_has_one_row_per_whiskey(store):
    df = store.dataframe()
    assert len(df) == 7
    assert {"id", "price", "flavor_tags", "price_tier"} <= set(df.columns)


def test_update_user_with_sees_current_record(store):
    store.update_user(
        "user002",
        history=store.get_user("user002").history.with_like("w005"),
    )
    user = store.update_user_with("user002", lambda u: {"history": u.history.with_like("w007")})
    assert user.history.liked == frozenset({"w002", "w005", "w007"})
    assert store.get_user("user002") is user


def test_update_with_unknown_id(store):
    assert store.update_user_with("ghost", lambda u: {}) is None
    assert store.update_whiskey_with("w999", lambda w: {}) is None


def test_update_whiskey_with(store):
    updated = store.update_whiskey_with("w005", lambda w: {"average_rating": w.average_rating - 1})
    assert updated.average_rating == 3.0
    assert store.get_whiskey("w005").average_rating == 3.0


# ── Invariants ───────────────────────────────────────────────────────────


def test_duplicate_whiskey_id_rejected(store):
    w001 = store.get_whiskey("w001")
    with pytest.raises(StorageError):
        CatalogStore([w001, w001])


def test_duplicate_username_rejected(store):
    with pytest.raises(StorageError):
        store.add_user(User(id="user099", username="islay_fan"))


def test_add_tasting_note_links_owner(store):
    store.add_tasting_note(_note())
    assert store.get_user("user002").note_ids == ("tn-x",)


def test_add_tasting_note_rejects_duplicate_id(store):
    store.add_tasting_note(_note())
    with pytest.raises(StorageError):
        store.add_tasting_note(_note())


def test_add_tasting_note_rejects_unknown_owner(store):
    with pytest.raises(StorageError):
        store.add_tasting_note(_note(user_id="ghost"))


def test_remove_tasting_note_unlinks_owner(store):
    removed = store.remove_tasting_note("tn001")
    assert removed.id == "tn001"
    assert store.get_note("tn001") is None
    assert store.get_user("user001").note_ids == ()
    assert store.remove_tasting_note("tn001") is None


def test_update_unknown_user_returns_none(store):
    assert store.update_user("ghost", note_ids=()) is None


def test_replace_unknown_whiskey_fails(store):
    w001 = store.get_whiskey("w001")
    with pytest.raises(StorageError):
        store.replace_whiskey(w001.model_copy(update={"id": "w999"}))
