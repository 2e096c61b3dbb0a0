"""
Tick Dispatcher

CONTRACT:
    Input:  Tick (from any TickFeed or the API)
    Output: RiskState (published after every applied tick)

Processing a tick is atomic: no other tick interleaves between the
history mutation and the metrics/suggestions recompute.
"""

from liverisk.services.dispatcher.dispatcher import (
    TickDispatcher,
    get_dispatcher,
    start_dispatcher,
    stop_dispatcher,
)

__all__ = [
    "TickDispatcher",
    "get_dispatcher",
    "start_dispatcher",
    "stop_dispatcher",
]
