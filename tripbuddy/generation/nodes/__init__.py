"""Node functions for the generation graph."""

from tripbuddy.generation.nodes.readiness import make_readiness_node
from tripbuddy.generation.nodes.attempt import (
    accept_payload,
    error_record,
    make_attempt_node,
)
from tripbuddy.generation.nodes.outcome import (
    accept_node,
    build_failure_payload,
    make_fail_node,
)

__all__ = [
    "make_readiness_node",
    "accept_payload",
    "error_record",
    "make_attempt_node",
    "accept_node",
    "build_failure_payload",
    "make_fail_node",
]
