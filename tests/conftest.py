"""
Shared fixtures: the RFC 8439 test key and the locale that carries its
counter and nonce.
"""

import pytest

from chaos.locale import Locale
from vectors import RFC_KERNEL, RFC_POSITION


@pytest.fixture
def kernel():
    """RFC 8439 test key as 8 words."""
    return list(RFC_KERNEL)


@pytest.fixture
def rfc_locale():
    """Locale whose position words are exactly RFC_POSITION."""
    return Locale(
        pebble=(RFC_POSITION[0] << 32) | RFC_POSITION[1],
        stream=(RFC_POSITION[2] << 32) | RFC_POSITION[3],
    )
