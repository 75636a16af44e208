# alert.py
#
# Trace level: how close the operator is to being located.
# Only ever goes up; 100 means the session is compromised.

MAX_TRACE = 100
CRITICAL_TRACE = 70


class AlertState:
    def __init__(self, trace_level=0):
        self.trace_level = min(MAX_TRACE, max(0, trace_level))

    def increment(self, amount):
        if amount < 0:
            raise ValueError("trace level cannot be decreased")
        self.trace_level = min(MAX_TRACE, self.trace_level + amount)
        return self.trace_level

    @property
    def critical(self):
        return self.trace_level > CRITICAL_TRACE

    @property
    def compromised(self):
        return self.trace_level >= MAX_TRACE
