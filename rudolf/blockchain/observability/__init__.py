# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Provides Prometheus metrics for the Rudolf token.
"""

from .metrics import metrics_registry, update_metrics, record_events

__all__ = ['metrics_registry', 'update_metrics', 'record_events']
