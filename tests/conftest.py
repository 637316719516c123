import numpy as np
import pytest

from color_sandbox.colormodel import Color
from color_sandbox.config import SandboxConfig
from color_sandbox.display import RecordingDisplay
from color_sandbox.session import SandboxSession


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def small_config():
    return SandboxConfig(picker_width=16, picker_height=12, wheel_size=33, nearby_width=200, seed=5)


@pytest.fixture
def session(small_config, clock):
    return SandboxSession(
        RecordingDisplay(),
        config=small_config,
        rng=np.random.default_rng(5),
        color=Color.from_hsl(200, 70, 50),
        clock=clock,
    )
