"""Carrier port: abstract interface for carrier tracking integrations.

The order workflow programs against the port; adapters are swapped via
configuration.
"""

from abc import ABC, abstractmethod


class CarrierPort(ABC):
    """Abstract interface for carrier adapters."""

    @abstractmethod
    def tracking_url(self, carrier: str, tracking_number: str) -> str:
        """Build the public tracking link for a parcel.

        Returns:
            The URL, or ``"#"`` when the carrier has no known tracking page.
        """
        ...
