import pytest
from rudolf.protocol.config.calendar import (
    SECONDS_PER_DAY, is_leap_year, days_between_xmas, xmas_timestamp, first_xmas_year
)
from rudolf.protocol.config.params import NETWORKS, get_network, MONTH_SECONDS

XMAS_2021 = 1640390400


def test_xmas_2021_timestamp():
    assert xmas_timestamp(2021) == XMAS_2021


def test_leap_years():
    assert is_leap_year(2024)
    assert is_leap_year(2000)
    assert not is_leap_year(1900)
    assert not is_leap_year(2023)


def test_xmas_spacing_accounts_for_leap_day():
    assert days_between_xmas(2024) == 366
    assert days_between_xmas(2025) == 365
    assert xmas_timestamp(2024) - xmas_timestamp(2023) == 366 * SECONDS_PER_DAY
    assert xmas_timestamp(2023) - xmas_timestamp(2022) == 365 * SECONDS_PER_DAY
    # 2026-12-25 00:00 UTC
    assert xmas_timestamp(2026) == 1798156800


def test_first_xmas_year():
    assert first_xmas_year(XMAS_2021) == 2021
    assert first_xmas_year(XMAS_2021 - 1) == 2021
    assert first_xmas_year(XMAS_2021 + 1) == 2022
    assert first_xmas_year(0) == 1970
    assert first_xmas_year(xmas_timestamp(1970)) == 1970
    # mid-2024 and New Year's Eve 2024
    assert first_xmas_year(1718409600) == 2024
    assert first_xmas_year(xmas_timestamp(2024) + 6 * SECONDS_PER_DAY) == 2025
    assert first_xmas_year(xmas_timestamp(2100)) == 2100


def test_xmas_before_epoch_rejected():
    with pytest.raises(ValueError):
        xmas_timestamp(1969)


def test_month_is_twelfth_of_year():
    assert MONTH_SECONDS == 2_628_000


def test_network_selection(monkeypatch):
    assert get_network("mainnet") is NETWORKS["mainnet"]

    monkeypatch.setenv("RDF_NETWORK", "mainnet")
    assert get_network().token_symbol == "RDF"

    monkeypatch.delenv("RDF_NETWORK")
    assert get_network().network_id == "devnet"

    with pytest.raises(ValueError, match="Unknown network"):
        get_network("testnet")
