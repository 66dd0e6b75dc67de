"""Receiver-side fix state."""

from gnss_viewer.receiver.fix_aggregator import FixAggregator

__all__ = ["FixAggregator"]
