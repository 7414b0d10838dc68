"""
Testing — Test doubles for generated hub clients.
"""

from hubgen.testing.channel import EventChannel
from hubgen.testing.fake import FakeHubClientBase, build_fake_class, record_value

__all__ = [
    "EventChannel",
    "FakeHubClientBase",
    "build_fake_class",
    "record_value",
]
