"""HTTP transport for the remote advisor.

Each call is a JSON POST to ``<base_url>/api/ai/<endpoint>``. Any network
error, non-2xx status or unreadable body becomes AdvisoryUnavailableError.
"""

from typing import Any
import logging

import requests

from walletcycle.domain.advisory import (
    AdvisoryClient,
    LimitForecast,
    PatternInsight,
    Recommendation,
    TransactionCategory,
)
from walletcycle.domain.errors import AdvisoryUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HTTPAdvisoryClient(AdvisoryClient):
    """Advisor reached over HTTP."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the client.

        Args:
            base_url: Advisor root URL, e.g. "http://localhost:5000"
            timeout: Seconds to wait for each request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, endpoint: str, body: dict[str, Any]) -> Any:
        url = f"{self.base_url}/api/ai/{endpoint}"
        try:
            resp = requests.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise AdvisoryUnavailableError(f"Advisor request to {endpoint} failed: {e}") from e

        if not 200 <= resp.status_code < 300:
            raise AdvisoryUnavailableError(
                f"Advisor answered {resp.status_code} for {endpoint}"
            )
        try:
            return resp.json()
        except ValueError as e:
            raise AdvisoryUnavailableError(f"Advisor sent invalid JSON for {endpoint}") from e

    def classify_transaction(self, description: str) -> TransactionCategory:
        return TransactionCategory.from_payload(
            self._post("classify-transaction", {"description": description})
        )

    def analyze_patterns(self, transactions: list[dict[str, Any]]) -> PatternInsight:
        return PatternInsight.from_payload(
            self._post("analyze-patterns", {"transactions": transactions})
        )

    def predict_limit(
        self, wallet: dict[str, Any], transactions: list[dict[str, Any]]
    ) -> LimitForecast:
        return LimitForecast.from_payload(
            self._post("predict-limit", {"wallet": wallet, "transactions": transactions})
        )

    def smart_recommendations(
        self, wallets: list[dict[str, Any]], transactions: dict[str, list[dict[str, Any]]]
    ) -> list[Recommendation]:
        payload = self._post(
            "smart-recommendations", {"wallets": wallets, "transactions": transactions}
        )
        if not isinstance(payload, list):
            raise AdvisoryUnavailableError("Advisor recommendations must be a list")
        return [Recommendation.from_payload(item) for item in payload]

    def ask(
        self, question: str, wallets: list[dict[str, Any]], transactions: list[dict[str, Any]]
    ) -> str:
        payload = self._post(
            "assistant",
            {"question": question, "wallets": wallets, "transactions": transactions},
        )
        if not isinstance(payload, dict) or not isinstance(payload.get("response"), str):
            raise AdvisoryUnavailableError("Advisor answer is missing 'response'")
        logger.debug("Advisor answered %d characters", len(payload["response"]))
        return payload["response"]
