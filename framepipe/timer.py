"""A stopwatch that prints its elapsed time once."""

from __future__ import annotations

import sys
import time


class Timer:
    """Measures time from construction until stopped; usable as a context manager."""

    def __init__(self, name: str = "Timer") -> None:
        self.name = name
        self._start = time.perf_counter_ns()
        self._end: int | None = None

    @property
    def stopped(self) -> bool:
        return self._end is not None

    def elapsed_microseconds(self) -> int:
        """Whole microseconds elapsed, frozen once the timer has stopped."""
        end = self._end if self._end is not None else time.perf_counter_ns()
        return (end - self._start) // 1000

    def stop_print(self) -> str | None:
        """Stop the timer and print the elapsed time; later calls do nothing."""
        if self._end is not None:
            return None
        self._end = time.perf_counter_ns()
        microseconds = self.elapsed_microseconds()
        milliseconds = microseconds / 1000.0
        seconds = milliseconds / 1000.0
        line = (
            f"{self.name:<18} Elapsed time: {microseconds:<10d} us | "
            f"{milliseconds:<10.3f} ms | {seconds:<10.6f} s"
        )
        print(line, file=sys.stdout)
        return line

    def __enter__(self) -> "Timer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop_print()