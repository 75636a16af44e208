import pytest

from desktop import Desktop


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def desktop(clock):
    return Desktop(log_path=None, clock=clock, rng=FixedRandom(0.0))


@pytest.fixture
def shell(desktop):
    return desktop.shell
