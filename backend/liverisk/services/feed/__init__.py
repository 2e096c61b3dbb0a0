"""
Tick Feeds

Inbound price streams for the TickDispatcher.
- MockTickFeed: random walk, one instrument every ~800ms
- QueueTickFeed: bounded, ticks pushed by an external producer
- ReplayTickFeed: recorded ticks, for tests and offline runs
"""

from liverisk.services.feed.interface import TickFeed
from liverisk.services.feed.mock_feed import MockTickFeed
from liverisk.services.feed.queue_feed import QueueTickFeed
from liverisk.services.feed.replay_feed import ReplayTickFeed

__all__ = [
    "TickFeed",
    "MockTickFeed",
    "QueueTickFeed",
    "ReplayTickFeed",
]
