"""Carrier tracking adapters: pluggable tracking link generation."""

import os

_carrier_instance = None


def get_carrier():
    """Return the configured carrier adapter (singleton).

    Uses the static link table by default. Select another adapter via the
    CARRIER_ADAPTER environment variable.
    """
    global _carrier_instance
    if _carrier_instance is None:
        adapter = os.environ.get("CARRIER_ADAPTER", "static")
        if adapter == "static":
            from ordering.carrier.static_adapter import StaticTrackingLinks

            _carrier_instance = StaticTrackingLinks()
        elif adapter == "fake":
            from ordering.carrier.fake_adapter import FakeCarrier

            _carrier_instance = FakeCarrier()
        else:
            raise ValueError(f"Unknown carrier adapter: {adapter}")
    return _carrier_instance


def reset_carrier():
    """Reset the carrier singleton (useful for testing)."""
    global _carrier_instance
    _carrier_instance = None


def generate_tracking_url(carrier: str, tracking_number: str) -> str:
    """Public tracking link for a parcel, through the configured adapter."""
    return get_carrier().tracking_url(carrier, tracking_number)
