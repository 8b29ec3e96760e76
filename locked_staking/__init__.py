"""
Locked-staking reward pool: functional core, token ledger and host runtime.
"""
