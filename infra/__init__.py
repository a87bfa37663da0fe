"""
Infrastructure module exports.

Configuration and provider selection for the relay.
"""

from .config import (
    ConfigurationError,
    RelayConfig,
    STTBackendType,
    SummaryBackendType,
    UnsupportedProviderError,
    get_config,
)

__all__ = [
    "RelayConfig",
    "get_config",
    "ConfigurationError",
    "UnsupportedProviderError",
    "STTBackendType",
    "SummaryBackendType",
]
