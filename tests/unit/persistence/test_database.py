"""Tests for database helpers."""

import pytest

from oidclink.persistence.database import sync_url


class TestSyncUrl:
    """Tests for sync_url."""

    @pytest.mark.parametrize(
        "url,driver",
        [
            ("postgresql+asyncpg://wiki:secret@db:5432/wiki", "postgresql"),
            ("sqlite+aiosqlite:///wiki.db", "sqlite"),
            ("postgresql+psycopg://wiki@db/wiki", "postgresql+psycopg"),
        ],
    )
    def test_driver_swapped(self, url, driver):
        """Async drivers map to their sync counterpart, others are kept."""
        assert sync_url(url).drivername == driver

    def test_rest_of_url_kept(self):
        """Credentials, host and database survive the swap."""
        url = sync_url("postgresql+asyncpg://wiki:secret@db:5432/wiki")

        assert url.username == "wiki"
        assert url.password == "secret"
        assert (url.host, url.port, url.database) == ("db", 5432, "wiki")
