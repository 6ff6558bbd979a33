"""Scoped configuration overrides."""

import asyncio

import pytest

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.context import (
    AppContext,
    get_config,
    get_context,
    merge_configs,
    with_context,
)


class TestContextManager:
    def test_default_context_available(self):
        context = get_context()

        assert isinstance(context, AppContext)
        assert isinstance(get_config(), ConfigData)
        assert context.config is get_config()

    def test_test_configuration_is_active(self):
        config = get_config()
        assert config.app.environment == "test"
        assert config.app.jwt_secret == "test-jwt-secret"

    def test_with_context_override_single_level(self):
        original = get_config()

        override = ConfigData()
        override.catalog.max_page_size = 5

        with with_context(override):
            assert get_config().catalog.max_page_size == 5
            # untouched settings come from the enclosing configuration
            assert get_config().app.jwt_secret == original.app.jwt_secret

        assert get_config() is original

    def test_nested_overrides(self):
        outer = ConfigData()
        outer.catalog.default_page_size = 20
        inner = ConfigData()
        inner.jwt.issuer = "inner-issuer"

        with with_context(outer):
            with with_context(inner):
                assert get_config().catalog.default_page_size == 20
                assert get_config().jwt.issuer == "inner-issuer"
            assert get_config().jwt.issuer == "product-catalog"

        assert get_config().catalog.default_page_size == 10

    def test_restored_after_exception(self):
        original = get_config()
        override = ConfigData()
        override.app.environment = "production"

        with pytest.raises(RuntimeError):
            with with_context(override):
                raise RuntimeError("boom")

        assert get_config() is original

    def test_none_is_a_no_op(self):
        original = get_config()
        with with_context(None):
            assert get_config() is original

    def test_rejects_other_types(self):
        with pytest.raises(ValueError, match="ConfigData"):
            with with_context({"catalog": {"max_page_size": 5}}):
                pass

    async def test_override_is_visible_in_tasks(self):
        override = ConfigData()
        override.catalog.max_page_size = 7

        async def read_limit() -> int:
            await asyncio.sleep(0)
            return get_config().catalog.max_page_size

        with with_context(override):
            assert await asyncio.create_task(read_limit()) == 7

        assert await read_limit() == 100


def test_merge_configs_keeps_base_values():
    base = ConfigData()
    base.database.url = "sqlite:///base.db"
    override = ConfigData()
    override.database.echo = True

    merged = merge_configs(base, override)

    assert merged.database.url == "sqlite:///base.db"
    assert merged.database.echo is True
