"""
Ledger state and encoding for the staking pool host
"""

from .balances import TokenLedger
from .canonical import canonical_json_bytes, domain_sep_bytes, sha256_hex

__all__ = [
    "TokenLedger",
    "canonical_json_bytes",
    "domain_sep_bytes",
    "sha256_hex",
]
