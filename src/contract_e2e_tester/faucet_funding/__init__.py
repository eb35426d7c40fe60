"""Faucet funding exports."""

from .faucet_filler import FaucetFiller, FaucetTimeoutError, FaucetTransientError

__all__ = ["FaucetFiller", "FaucetTimeoutError", "FaucetTransientError"]
