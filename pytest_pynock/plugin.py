"""
Pytest plugin entry point for pynock.
"""

from pytest_pynock import (
    nock,
    nock_transport_patch,
    pytest_configure,
    response_builder,
)

__all__ = [
    "pytest_configure",
    "nock",
    "nock_transport_patch",
    "response_builder",
]
