"""Static carrier adapter: tracking links from a fixed table of carriers."""

from urllib.parse import quote

from ordering.carrier.port import CarrierPort

UNKNOWN_CARRIER_URL = "#"

TRACKING_URL_PREFIXES = {
    "ups": "https://www.ups.com/track?tracknum=",
    "fedex": "https://www.fedex.com/fedextrack/?tracknumbers=",
    "dhl": "https://www.dhl.com/en/express/tracking.html?AWB=",
    "usps": "https://tools.usps.com/go/TrackConfirmAction?tLabels=",
    "royalmail": "https://www.royalmail.com/track-your-item#/tracking-results/",
}


def normalize_carrier(carrier: str) -> str:
    """``"Royal Mail"`` → ``"royalmail"``."""
    return "".join((carrier or "").lower().split())


class StaticTrackingLinks(CarrierPort):
    """Builds links by appending the tracking number to a per-carrier prefix."""

    def tracking_url(self, carrier: str, tracking_number: str) -> str:
        prefix = TRACKING_URL_PREFIXES.get(normalize_carrier(carrier))
        if prefix is None or not tracking_number:
            return UNKNOWN_CARRIER_URL
        return f"{prefix}{quote(tracking_number.strip(), safe='')}"
