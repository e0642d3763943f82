"""Unit tests for the singleton registry."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from comms_sdk.utils.registry import Registry


@pytest.mark.unit
class TestRegistry:
    """Test suite for Registry."""

    def test_factory_runs_once_per_key(self):
        created = []

        def factory():
            created.append(object())
            return created[-1]

        first = Registry.get_instance("key", factory)
        second = Registry.get_instance("key", factory)

        assert first is second
        assert len(created) == 1

    def test_keys_are_independent(self):
        assert Registry.get_instance("a", object) is not Registry.get_instance("b", object)

    def test_clear(self):
        before = Registry.get_instance("a", object)

        Registry.clear()

        assert Registry.get_instance("a", object) is not before

    def test_concurrent_access_creates_single_instance(self):
        with ThreadPoolExecutor(max_workers=8) as pool:
            instances = list(pool.map(lambda _: Registry.get_instance("shared", object), range(64)))

        assert all(instance is instances[0] for instance in instances)
