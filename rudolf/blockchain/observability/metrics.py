# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Exports token metrics in Prometheus format.

Metrics:
- Supply, accounts, pause flag
- Xmas airdrop schedule and distribution count
- Transfers, claims and claimed amount
"""

from prometheus_client import Counter, Gauge, CollectorRegistry
from ...protocol.types.common import EventType

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# LEDGER METRICS
# ═══════════════════════════════════════════════════════════════════

total_supply = Gauge(
    'rudolf_total_supply',
    'Total token supply (initial supply + claimed airdrops)',
    registry=metrics_registry
)

accounts_total = Gauge(
    'rudolf_accounts_total',
    'Number of accounts with a non-zero balance',
    registry=metrics_registry
)

paused = Gauge(
    'rudolf_paused',
    '1 when transfers and claims are paused',
    registry=metrics_registry
)

transfers_total = Counter(
    'rudolf_transfers_total',
    'Total number of transfers (mints included)',
    registry=metrics_registry
)

# ═══════════════════════════════════════════════════════════════════
# AIRDROP METRICS
# ═══════════════════════════════════════════════════════════════════

next_distribution_time = Gauge(
    'rudolf_next_distribution_timestamp',
    'Unix time of the next Xmas airdrop',
    registry=metrics_registry
)

distributions_total = Gauge(
    'rudolf_distributions_total',
    'Number of Xmas airdrops that occurred',
    registry=metrics_registry
)

snapshots_total = Counter(
    'rudolf_snapshots_total',
    'Total snapshots taken by this process',
    registry=metrics_registry
)

claims_total = Counter(
    'rudolf_claims_total',
    'Total successful airdrop claims',
    registry=metrics_registry
)

claimed_amount_total = Counter(
    'rudolf_claimed_amount_total',
    'Total airdrop amount claimed (minimal units)',
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def record_events(events):
    """
    Update counters from the events of a committed call.

    Args:
        events: List of Event
    """
    for event in events:
        if event.event_type == EventType.TRANSFER:
            transfers_total.inc()
        elif event.event_type == EventType.SNAPSHOT:
            snapshots_total.inc()
        elif event.event_type == EventType.AIRDROP_CLAIMED:
            claims_total.inc()
            claimed_amount_total.inc(event.data["amount"])


def update_metrics(token):
    """
    Update all gauges from token state.
    Called when metrics are scraped.

    Args:
        token: RudolfToken instance
    """
    state = token.state

    total_supply.set(state.total_supply)
    accounts_total.set(sum(1 for acc in state.accounts.values() if acc.balance > 0))
    paused.set(1 if state.paused else 0)
    next_distribution_time.set(state.schedule.next_timestamp)
    distributions_total.set(len(state.airdrops))
