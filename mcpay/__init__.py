"""mcpay: HMAC-authenticated payment webhook with a bounded in-memory ledger."""

__version__ = "0.1.0"
