"""SpamShield: contact and spam-reporting API."""

__version__ = "0.1.0"
