"""Fake carrier adapter: deterministic tracking links for testing.

Configurable to fail so the shipping workflow's fallback can be exercised.
"""

from ordering.carrier.port import CarrierPort


class FakeCarrier(CarrierPort):
    """Fake carrier that always succeeds by default."""

    def __init__(self):
        self.should_succeed = True
        self.failure_reason = "Carrier unavailable"
        self.requests: list[tuple[str, str]] = []

    def configure(self, should_succeed: bool = True, failure_reason: str = "Carrier unavailable"):
        """Configure the fake carrier behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def tracking_url(self, carrier: str, tracking_number: str) -> str:
        self.requests.append((carrier, tracking_number))
        if not self.should_succeed:
            raise ConnectionError(self.failure_reason)
        return f"https://fake-carrier.example.com/track/{tracking_number}"
