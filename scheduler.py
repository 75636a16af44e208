# scheduler.py
#
# Cooperative queue of deferred callbacks. Nothing runs on its own: the
# owner calls run_due() from its event loop (or a timer thread holding the
# desktop lock) and every task whose delay has elapsed fires exactly once.

import heapq
import itertools
import time


class DeferredTask:
    def __init__(self, due, seq, callback, label=None):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.label = label
        self.done = False

    def __lt__(self, other):
        return (self.due, self.seq) < (other.due, other.seq)

    def __repr__(self):
        return f"DeferredTask({self.label!r}, due={self.due:.3f})"


class EventQueue:
    def __init__(self, clock=time.monotonic):
        self.clock = clock
        self._heap = []
        self._seq = itertools.count()

    # No cancellation: once scheduled, a task always fires.
    def schedule(self, delay, callback, label=None):
        if delay < 0:
            raise ValueError("delay must not be negative")
        task = DeferredTask(self.clock() + delay, next(self._seq), callback, label)
        heapq.heappush(self._heap, task)
        return task

    @property
    def pending(self):
        return len(self._heap)

    def next_due(self):
        return self._heap[0].due if self._heap else None

    def run_due(self, now=None):
        """Fire every task due at or before `now`, earliest first.

        Tasks that share a due time fire in the order they were scheduled.
        Returns the number of tasks fired.
        """
        if now is None:
            now = self.clock()

        fired = 0
        while self._heap and self._heap[0].due <= now:
            task = heapq.heappop(self._heap)
            task.callback()
            task.done = True
            fired += 1
        return fired
