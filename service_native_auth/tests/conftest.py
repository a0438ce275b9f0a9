"""
Shared fixtures for native auth tests.
"""

import pytest

from service_native_auth.app.cache import MemoryCache
from .helpers import BLOCK_HASH, BLOCK_TIMESTAMP, FakeBlockApi, WalletAccount


@pytest.fixture
def account():
    return WalletAccount.generate()


@pytest.fixture
def other_account():
    return WalletAccount.generate()


@pytest.fixture
def block_api():
    return FakeBlockApi(
        current_timestamp=BLOCK_TIMESTAMP + 1800,
        blocks={BLOCK_HASH: BLOCK_TIMESTAMP}
    )


@pytest.fixture
def memory_cache():
    return MemoryCache()
