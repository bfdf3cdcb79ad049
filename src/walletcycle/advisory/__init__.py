"""Remote advisor transports."""

from walletcycle.advisory.http_client import HTTPAdvisoryClient

__all__ = ["HTTPAdvisoryClient"]
