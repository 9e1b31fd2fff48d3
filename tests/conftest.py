"""
Shared fixtures: fake transports and a small A-B-C line topology.
"""

import pytest

from dvroute.state import NodeID, NodeState

from tests.mocks import FakeTransport, make_state


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def state_a() -> NodeState:
    # A - B (1), B - C (1), no direct A - C link
    return make_state(NodeID.A, {NodeID.B: 1})


@pytest.fixture
def state_b() -> NodeState:
    return make_state(NodeID.B, {NodeID.A: 1, NodeID.C: 1})


@pytest.fixture
def sample_config_text() -> str:
    return "\n".join([
        "A", "5000",
        "A", "0", "127.0.0.1", "5000",
        "B", "3", "127.0.0.1", "5001",
        "C", "0", "127.0.0.1", "5002",
        "D", "7", "10.0.0.4", "5003",
        "E", "-1", "127.0.0.1", "5004",
        "F", "1000", "127.0.0.1", "5005",
    ]) + "\n"
