import random

import pytest

from stoney.data_models import Environment


@pytest.fixture
def env():
    return Environment()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def headless(monkeypatch):
    """pygame with dummy video and audio drivers."""
    import pygame
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    pygame.init()
    yield pygame
    pygame.quit()
