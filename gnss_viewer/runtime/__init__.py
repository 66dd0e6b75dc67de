"""Threading and publication around the core components."""

from gnss_viewer.runtime.channel import SnapshotChannel
from gnss_viewer.runtime.feed import GnssFeed
from gnss_viewer.runtime.staleness import StalenessTimer

__all__ = ["GnssFeed", "SnapshotChannel", "StalenessTimer"]
