"""
Common utilities shared across all modules.
"""
import time

def current_time_ms() -> int:
    """Wall clock in epoch milliseconds, the unit votes are timestamped in."""
    return int(time.time() * 1000)
