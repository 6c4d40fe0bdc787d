"""Tests for carrier tracking links."""

import pytest
from ordering.carrier import generate_tracking_url, get_carrier, reset_carrier
from ordering.carrier.fake_adapter import FakeCarrier
from ordering.carrier.static_adapter import StaticTrackingLinks, normalize_carrier


@pytest.mark.parametrize(
    "carrier,expected",
    [
        ("UPS", "https://www.ups.com/track?tracknum=ABC123"),
        ("FedEx", "https://www.fedex.com/fedextrack/?tracknumbers=ABC123"),
        ("dhl", "https://www.dhl.com/en/express/tracking.html?AWB=ABC123"),
        ("USPS", "https://tools.usps.com/go/TrackConfirmAction?tLabels=ABC123"),
        ("Royal Mail", "https://www.royalmail.com/track-your-item#/tracking-results/ABC123"),
    ],
)
def test_known_carriers(carrier, expected):
    assert StaticTrackingLinks().tracking_url(carrier, "ABC123") == expected


def test_unknown_carrier():
    assert StaticTrackingLinks().tracking_url("Pigeon Post", "ABC123") == "#"


def test_normalize_carrier():
    assert normalize_carrier(" Royal  Mail ") == "royalmail"


def test_default_adapter_is_static():
    assert isinstance(get_carrier(), StaticTrackingLinks)
    assert generate_tracking_url("ups", "1Z") == "https://www.ups.com/track?tracknum=1Z"


def test_adapter_selected_by_environment(monkeypatch):
    monkeypatch.setenv("CARRIER_ADAPTER", "fake")
    reset_carrier()
    assert isinstance(get_carrier(), FakeCarrier)


def test_unknown_adapter(monkeypatch):
    monkeypatch.setenv("CARRIER_ADAPTER", "telepathy")
    reset_carrier()
    with pytest.raises(ValueError):
        get_carrier()
