"""Brain service - Claude completions with per-wallet memory and Solana helpers."""

__version__ = "2.0.0"
