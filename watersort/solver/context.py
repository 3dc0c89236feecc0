"""
Solution Context Module - Shared context for strategy execution.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from .position import Position


@dataclass
class SolutionContext:
    """
    Context passed to strategies containing the position to solve, the
    search budget, cancellation, and progress reporting.

    Budgets are cooperative: strategies check them between rounds.

    Attributes:
        position: Initial position to solve
        cancel_flag: Threading event for cancellation
        timeout_sec: Maximum computation time in seconds, None for no limit
        max_rounds: Maximum rounds a strategy may run, None for no limit
        start_time: When computation started
        progress_callback: Optional callback for progress updates
    """
    position: Position
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: Optional[float] = 60.0
    max_rounds: Optional[int] = None
    start_time: float = field(default_factory=time.time)
    progress_callback: Optional[Callable[[float, str], None]] = None

    def abort_reason(self, rounds_done: int = 0) -> Optional[str]:
        """
        Check every budget and report which one stops the search.

        Args:
            rounds_done: Rounds the strategy has completed so far

        Returns:
            Reason string, or None if the search may continue
        """
        if self.cancel_flag.is_set():
            return "cancelled"
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return f"timeout after {self.timeout_sec:g}s"
        if self.max_rounds is not None and rounds_done >= self.max_rounds:
            return f"round budget of {self.max_rounds} exhausted"
        return None

    def is_cancelled(self) -> bool:
        """
        Check if cancellation requested or timeout exceeded.

        Returns:
            True if strategy should stop execution
        """
        if self.cancel_flag.is_set():
            return True
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return True
        return False

    def report_progress(self, percent: float, message: str = "") -> None:
        """
        Report progress to the caller.

        Args:
            percent: Progress from 0.0 to 1.0
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(percent, message)

    def elapsed_time(self) -> float:
        """
        Get seconds elapsed since computation started.

        Returns:
            Elapsed time in seconds
        """
        return time.time() - self.start_time

    def remaining_time(self) -> Optional[float]:
        """
        Get seconds remaining before timeout.

        Returns:
            Remaining time in seconds (may be negative if exceeded), None without a timeout
        """
        if self.timeout_sec is None:
            return None
        return self.timeout_sec - self.elapsed_time()
