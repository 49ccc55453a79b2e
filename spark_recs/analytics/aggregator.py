from __future__ import annotations

from collections import Counter
from typing import Any


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    calls = [e for e in events if e["type"] == "recommendation"]
    clicks = [e for e in events if e["type"] == "affiliate_click"]
    total = len(calls)

    # Average response time
    times = [c["response_time_ms"] for c in calls if "response_time_ms" in c]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Cards that never needed a business
    gated = sum(1 for c in calls if c.get("gated"))

    # Calls that came back empty despite passing the gate
    empty = sum(1 for c in calls if not c.get("gated") and c.get("results_returned", 0) == 0)

    # Top cities
    city_counter: Counter[str] = Counter()
    for c in calls:
        city_counter[c.get("city") or "unknown"] += 1
    top_cities = [{"name": n, "count": k} for n, k in city_counter.most_common(10)]

    # Sources of returned businesses
    source_counter: Counter[str] = Counter()
    for c in calls:
        for s in c.get("sources", []) or []:
            source_counter[s] += 1

    # Clicks
    click_counter: Counter[str] = Counter()
    for c in clicks:
        click_counter[c.get("source") or "unknown"] += 1
    commission = round(sum(c.get("commission", 0.0) for c in clicks), 4)

    mode_counter: Counter[str] = Counter(c.get("monetization_mode", "unknown") for c in calls)

    return {
        "total_recommendation_calls": total,
        "gated_calls": gated,
        "gate_rate": round(gated / total * 100, 1) if total else 0.0,
        "empty_results": empty,
        "avg_response_time_ms": avg_time,
        "top_cities": top_cities,
        "source_impressions": dict(source_counter),
        "monetization_modes": dict(mode_counter),
        "affiliate_clicks": {
            "total": len(clicks),
            "by_source": dict(click_counter),
            "commission_rate_sum": commission,
        },
    }
