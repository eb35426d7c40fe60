"""Faucet polling service that funds the suite wallet before paid transactions."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import httpx

from contract_e2e_tester.configuration.runtime_settings import FaucetSettings
from contract_e2e_tester.network_client.client_models import ClientContext

LOGGER = logging.getLogger(__name__)


class FaucetTransientError(Exception):
    """Raised for one failed faucet request; recovered locally by retrying."""


class FaucetTimeoutError(Exception):
    """Raised when the balance never reached the target within the configured limits."""


class FaucetFiller:
    """Request funds from a devnet faucet until the wallet balance reaches a target.

    The loop stops when the balance is at least `target_balance`, or raises
    `FaucetTimeoutError` once `timeout_seconds` elapse or `max_attempts` faucet
    requests were made. Failed faucet requests are logged and retried.
    """

    def __init__(
        self,
        settings: FaucetSettings,
        denom: str,
        *,
        http_client: httpx.Client | None = None,
        clock: Callable[[], float] | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._settings = settings
        self._denom = denom
        self._http_client = http_client or httpx.Client(
            timeout=settings.request_timeout_seconds
        )
        self._clock = clock or time.monotonic
        self._sleep = sleep or time.sleep
        self.requests_made = 0

    def fill_up(self, context: ClientContext) -> int:
        """Return the final balance once it is at least the configured target."""
        target = self._settings.target_balance
        deadline = self._clock() + self._settings.timeout_seconds
        balance = context.chain.balance(context.address, self._denom)
        while balance < target:
            if self._attempts_exhausted() or self._clock() >= deadline:
                raise FaucetTimeoutError(
                    f"Balance {balance}{self._denom} of {context.address} did not reach "
                    f"{target}{self._denom} after {self.requests_made} faucet requests."
                )
            try:
                self.request_funds(context.address)
            except FaucetTransientError as exc:
                LOGGER.warning("failed to get tokens from faucet: %s", exc)
            balance = context.chain.balance(context.address, self._denom)
            if balance < target:
                # Granted funds usually land a block after the faucet answers.
                self._sleep(self._settings.poll_interval_seconds)
        LOGGER.info("got tokens from faucet: %s%s", balance, self._denom)
        return balance

    def request_funds(self, address: str) -> None:
        """Issue one faucet request for `address`."""
        self.requests_made += 1
        try:
            response = self._http_client.get(self._settings.url, params={"address": address})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise FaucetTransientError(str(exc)) from exc

    def close(self) -> None:
        self._http_client.close()

    def _attempts_exhausted(self) -> bool:
        max_attempts = self._settings.max_attempts
        return max_attempts is not None and self.requests_made >= max_attempts
