from __future__ import annotations

from collections import Counter
from typing import Any


def _top(counter: Counter[str], n: int = 10) -> list[dict[str, Any]]:
    return [{"name": name, "count": count} for name, count in counter.most_common(n)]


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    recommends = [e for e in events if e["type"] == "recommend"]
    similars = [e for e in events if e["type"] == "similar"]
    total = len(recommends)

    # Average response time across both scorers
    times = [e["response_time_ms"] for e in recommends + similars if "response_time_ms" in e]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Requests that came back empty
    empty = sum(1 for e in recommends if not e.get("results_returned"))

    flavor_counter: Counter[str] = Counter()
    for e in recommends:
        for keyword in e.get("flavor_keywords", []) or []:
            flavor_counter[keyword] += 1

    category_counter: Counter[str] = Counter()
    for e in recommends:
        if e.get("category"):
            category_counter[e["category"]] += 1

    whiskey_counter: Counter[str] = Counter()
    for e in recommends:
        for whiskey_id in e.get("results", []) or []:
            whiskey_counter[whiskey_id] += 1

    personalized = sum(1 for e in recommends if e.get("user_id"))

    return {
        "total_recommendations": total,
        "total_similarity_lookups": len(similars),
        "avg_response_time_ms": avg_time,
        "empty_result_rate": round(empty / total * 100, 1) if total else 0.0,
        "personalized_rate": round(personalized / total * 100, 1) if total else 0.0,
        "top_flavor_keywords": _top(flavor_counter),
        "top_categories": _top(category_counter),
        "most_recommended": _top(whiskey_counter),
    }
