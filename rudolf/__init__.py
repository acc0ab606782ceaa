# MIT License
# Copyright (c) 2025 Hashborn

"""
Rudolf token: ERC20-style ledger with a yearly Xmas airdrop and monthly vesting.
"""

__version__ = "1.0.0"
