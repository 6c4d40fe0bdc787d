"""Email channel registry for customer notifications.

Provides singleton access to the email adapter. Uses the fake adapter by
default; a real provider can be selected via EMAIL_ADAPTER.
"""

import os

_email_instance = None


def get_email_channel():
    """Return the configured email adapter (singleton)."""
    global _email_instance
    if _email_instance is None:
        adapter = os.environ.get("EMAIL_ADAPTER", "fake")
        if adapter == "fake":
            from ordering.notification.fake_email import FakeEmailAdapter

            _email_instance = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown email adapter: {adapter}")
    return _email_instance


def reset_email_channel():
    """Reset the email singleton (useful for testing)."""
    global _email_instance
    _email_instance = None
