"""Tracking URL templates per carrier.

Each template carries a single ``{number}`` placeholder which is expanded
with the URL-escaped canonical tracking number.
"""

from __future__ import annotations

from urllib.parse import quote

UPS_URL = (
    "http://wwwapps.ups.com/WebTracking/track"
    "?loc=en_US&trackNums={number}&track.x=Track"
)
FEDEX_URL = "https://www.fedex.com/fedextrack/?tracknumbers={number}&cntry_code=us"
ONTRAC_URL = "https://www.ontrac.com/trackingres.asp?tracking_number={number}"

CARRIER_URL_TEMPLATES: dict[str, str] = {
    "ups": UPS_URL,
    "fedex": FEDEX_URL,
    "ontrac": ONTRAC_URL,
}


def url_for(carrier: str, number: str) -> str | None:
    """Expand the carrier's template, or ``None`` for unknown carriers."""
    template = CARRIER_URL_TEMPLATES.get(carrier.lower())
    if template is None:
        return None
    return template.replace("{number}", quote(number, safe=""))
