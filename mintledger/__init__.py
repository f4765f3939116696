"""PostgreSQL storage layer for an ecash mint: keysets, quotes, proofs, signatures and payments."""

__version__ = "0.1.0"