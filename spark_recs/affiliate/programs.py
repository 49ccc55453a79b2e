from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any, Iterable
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..analytics.store import record_event
from ..recommendations.models import Business, UserLocation

logger = logging.getLogger(__name__)

UTM_SOURCE = "spark_recs"


def _affiliate_id(program: str) -> str:
    return os.getenv(f"{program.upper()}_AFFILIATE_ID", "")


@dataclass(frozen=True)
class AffiliateProgram:
    key: str
    name: str
    commission: float
    cookie_days: int
    api_available: bool
    base_url: str
    tracking_param: str
    affiliate_id: str = field(default="")


def _program(key: str, name: str, commission: float, cookie_days: int,
             api_available: bool, base_url: str, tracking_param: str) -> AffiliateProgram:
    return AffiliateProgram(
        key=key,
        name=name,
        commission=commission,
        cookie_days=cookie_days,
        api_available=api_available,
        base_url=base_url,
        tracking_param=tracking_param,
        affiliate_id=_affiliate_id(key),
    )


PROGRAMS: dict[str, AffiliateProgram] = {
    p.key: p
    for p in (
        _program("viator", "Viator", 0.08, 30, True, "https://www.viator.com", "pid"),
        _program("getyourguide", "GetYourGuide", 0.09, 31, True, "https://www.getyourguide.com", "partner_id"),
        _program("fever", "Fever", 0.10, 30, False, "https://feverup.com", "ref"),
        _program("ticketmaster", "Ticketmaster", 0.01, 7, True, "https://www.ticketmaster.com", "affiliate"),
        _program("stubhub", "StubHub", 0.07, 30, False, "https://www.stubhub.com", "aid"),
        _program("groupon", "Groupon", 0.06, 30, True, "https://www.groupon.com", "utm_source"),
    )
}


def generate_affiliate_link(
    program: str,
    url: str,
    extra_params: dict[str, str] | None = None,
) -> str:
    """
    Return *url* with the program's tracking and UTM parameters set.

    Unknown programs and URLs without a scheme/host are returned unchanged.
    """
    config = PROGRAMS.get(program)
    parts = urlsplit(url)
    if config is None or not parts.scheme or not parts.netloc:
        return url

    params = dict(parse_qsl(parts.query, keep_blank_values=True))
    if config.affiliate_id:
        params[config.tracking_param] = config.affiliate_id
    for key, value in (extra_params or {}).items():
        if value:
            params[key] = value
    params["utm_source"] = UTM_SOURCE
    params["utm_medium"] = "affiliate"
    params["utm_campaign"] = program

    return urlunsplit(parts._replace(query=urlencode(params)))


def decorate_with_affiliate_links(businesses: Iterable[Business]) -> list[Business]:
    """Copies of *businesses* whose URLs carry affiliate tracking; inputs are untouched."""
    decorated: list[Business] = []
    for b in businesses:
        if b.source not in PROGRAMS:
            decorated.append(b)
            continue
        location = re.sub(r"\s+", "-", b.city.lower()) if b.city else ""
        url = generate_affiliate_link(b.source, b.url, {"location": location, "activity": b.id})
        decorated.append(b.model_copy(update={"url": url}))
    return decorated


def track_affiliate_click(
    business: Business,
    user_location: UserLocation | None = None,
) -> dict[str, Any]:
    program = PROGRAMS.get(business.source)
    event = record_event("affiliate_click", {
        "business_id": business.id,
        "source": business.source,
        "city": business.city,
        "user_city": user_location.city if user_location and user_location.city else "unknown",
        "commission": program.commission if program else business.estimated_commission,
    })
    logger.info("Affiliate click tracked: %s (%s)", business.id, business.source)
    return event


def get_program_stats() -> list[dict[str, Any]]:
    return [
        {
            "program": p.key,
            "name": p.name,
            "commission": f"{p.commission * 100:.1f}%",
            "cookie_duration": f"{p.cookie_days} days",
            "api_available": p.api_available,
        }
        for p in PROGRAMS.values()
    ]
