"""
Render — Python source emission for bindings, registrations and fakes.
"""

from hubgen.render.client_source import render_client
from hubgen.render.fake_source import render_fake
from hubgen.render.package_source import render_package_init
from hubgen.render.registration_source import render_registration

__all__ = [
    "render_client",
    "render_fake",
    "render_package_init",
    "render_registration",
]
