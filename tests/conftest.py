"""Shared fixtures for the hardware-free test suite.

The acquisition engine only ever talks to the card through an injected
``read_fn(service_mode, block_list_mode, start_block, count)`` callable, so a
card is simulated here by :class:`FakeCard`, which answers from an in-memory
list of blocks and records every call it receives.
"""

from __future__ import annotations

import pytest

from transit import transit_card
from transit.transit_card import BLOCK_SIZE, NUM_BLOCKS
from transit.transit_records import pack_block


class FakeCard:
    """Callable stand-in for the transport's raw block read.

    Only the ``accepts`` encoding pair succeeds; blocks listed in ``bad``
    always fail, as does everything once ``dead`` is set.
    """

    def __init__(self, blocks, accepts=("le", "short"), bad=()):
        self.blocks = list(blocks)
        self.accepts = accepts
        self.bad = set(bad)
        self.dead = False
        self.calls: list[tuple[str, str, int, int]] = []

    def __call__(self, service_mode, block_list_mode, start_block, count):
        self.calls.append((service_mode, block_list_mode, start_block, count))
        if self.dead or (service_mode, block_list_mode) != self.accepts:
            return False, b""
        if start_block in self.bad or start_block >= len(self.blocks):
            return False, b""
        return True, b"".join(self.blocks[start_block:start_block + count])

    def modes_tried(self):
        return [(sc, bl) for sc, bl, _, _ in self.calls]


@pytest.fixture(autouse=True)
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace the retry delay with a recorder so tests run instantly."""

    recorded: list[float] = []
    monkeypatch.setattr(transit_card.time, "sleep", recorded.append)
    return recorded


@pytest.fixture
def history_blocks() -> list[bytes]:
    """Twenty non-blank blocks, newest first, balance rising with age."""

    return [pack_block(1000 - i, 1 + i, 2 + i, 100 + 10 * i) for i in range(NUM_BLOCKS)]


@pytest.fixture
def blank() -> bytes:
    return bytes(BLOCK_SIZE)


@pytest.fixture
def fake_card() -> type[FakeCard]:
    return FakeCard
