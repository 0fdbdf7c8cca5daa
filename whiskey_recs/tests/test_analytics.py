from whiskey_recs.analytics.aggregator import compute_analytics
from whiskey_recs.analytics.store import EventLog


def test_compute_analytics_empty():
    body = compute_analytics([])
    assert body["total_recommendations"] == 0
    assert body["avg_response_time_ms"] == 0.0
    assert body["empty_result_rate"] == 0.0


def test_compute_analytics_counts():
    events = [
        {"type": "recommend", "user_id": "user001", "flavor_keywords": ["peat"],
         "category": "single_malt", "results": ["w001"], "results_returned": 1,
         "response_time_ms": 2.0},
        {"type": "recommend", "user_id": None, "flavor_keywords": ["peat", "honey"],
         "category": None, "results": [], "results_returned": 0,
         "response_time_ms": 4.0},
        {"type": "similar", "reference_id": "w001", "results": ["w005"],
         "results_returned": 1, "response_time_ms": 6.0},
    ]
    body = compute_analytics(events)
    assert body["total_recommendations"] == 2
    assert body["total_similarity_lookups"] == 1
    assert body["avg_response_time_ms"] == 4.0
    assert body["empty_result_rate"] == 50.0
    assert body["personalized_rate"] == 50.0
    assert body["top_flavor_keywords"][0] == {"name": "peat", "count": 2}
    assert body["top_categories"] == [{"name": "single_malt", "count": 1}]
    assert body["most_recommended"] == [{"name": "w001", "count": 1}]


def test_event_log_filters_by_type():
    events = EventLog()
    events.record("recommend", {"results": []})
    events.record("similar", {"results": []})
    assert len(events.get_events()) == 2
    assert [e["type"] for e in events.get_events("similar")] == ["similar"]
    events.clear()
    assert events.get_events() == []


def test_event_log_keeps_only_the_newest():
    events = EventLog(maxlen=2)
    for query in ("peat", "honey", "sherry"):
        events.record("recommend", {"query": query})
    assert [e["query"] for e in events.get_events()] == ["honey", "sherry"]


def test_analytics_endpoint_tracks_recommendations(client, login):
    login()
    client.post("/recommendations", json={"query": "peaty"})
    client.post("/recommendations", json={"query": "peaty bourbon"})

    resp = client.get("/analytics")
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_recommendations"] == 2
    assert body["empty_result_rate"] == 50.0
    assert body["top_flavor_keywords"][0]["name"] == "peat"


def test_each_app_keeps_its_own_events(client, login, events):
    login()
    client.post("/recommendations", json={"query": "peaty"})
    assert [e["query"] for e in events.get_events("recommend")] == ["peaty"]
    assert EventLog().get_events() == []
