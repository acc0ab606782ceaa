# MIT License
# Copyright (c) 2025 Hashborn

import os
from typing import Dict

# Global Constants
DENOM = "rdf"
DECIMALS = 18
UNIT = 10**DECIMALS

# Twelve monthly unlock slots per distribution
VESTING_SLOTS = 12
# One twelfth of a 365-day year, not a calendar month
MONTH_SECONDS = 365 * 24 * 3600 // VESTING_SLOTS


class NetworkConfig:
    def __init__(self,
                 network_id: str,
                 token_name: str,
                 token_symbol: str,
                 initial_supply: int,
                 xmas_airdrop_amount: int,
                 first_xmas_year: int,
                 decimals: int = DECIMALS,
                 month_seconds: int = MONTH_SECONDS,
                 vesting_slots: int = VESTING_SLOTS,
                 bech32_prefix: str = DENOM,
                 # Catch-up is linear in elapsed years; log a warning above this many per call
                 catch_up_warn_threshold: int = 10,
                 # Devnet specific deterministic keys (hex strings)
                 deployer_priv_key: str = None):
        self.network_id = network_id
        self.token_name = token_name
        self.token_symbol = token_symbol
        self.initial_supply = initial_supply
        self.xmas_airdrop_amount = xmas_airdrop_amount
        self.first_xmas_year = first_xmas_year
        self.decimals = decimals
        self.month_seconds = month_seconds
        self.vesting_slots = vesting_slots
        self.bech32_prefix = bech32_prefix
        self.catch_up_warn_threshold = catch_up_warn_threshold
        self.deployer_priv_key = deployer_priv_key

    def __repr__(self) -> str:
        return f"NetworkConfig(network_id={self.network_id!r}, symbol={self.token_symbol!r})"


NETWORKS: Dict[str, NetworkConfig] = {
    "devnet": NetworkConfig(
        network_id="devnet",
        token_name="Rudolf Devnet",
        token_symbol="dRDF",
        initial_supply=4_200_000_000 * UNIT,
        xmas_airdrop_amount=1_200_000_000 * UNIT,
        first_xmas_year=2021,
        catch_up_warn_threshold=5,
        # Deterministic deployer key for Devnet
        deployer_priv_key="8b1f2c4e6a0d3f5b7c9e1a2d4f6b8c0e2a4d6f8b0c2e4a6d8f0b2c4e6a8d0f2b"
    ),
    "mainnet": NetworkConfig(
        network_id="mainnet",
        token_name="Rudolf",
        token_symbol="RDF",
        initial_supply=4_200_000_000 * UNIT,
        xmas_airdrop_amount=1_200_000_000 * UNIT,
        first_xmas_year=2021,
    ),
}


def get_network(network_id: str = None) -> NetworkConfig:
    network_id = network_id or os.environ.get("RDF_NETWORK", "devnet")
    if network_id not in NETWORKS:
        raise ValueError(f"Unknown network '{network_id}' (known: {', '.join(NETWORKS)})")
    return NETWORKS[network_id]


# Default to devnet for now
CURRENT_NETWORK = NETWORKS["devnet"]
