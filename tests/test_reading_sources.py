"""Tests de fuentes de lecturas (memoria y SQL).

Ejecutar:
    pytest tests/test_reading_sources.py -v
"""

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from env_monitor_services.monitoring.models import DeviceInfo
from env_monitor_services.repository import (
    InMemoryReadingSource,
    ReadingSourceError,
    build_snapshot,
)
from env_monitor_services.repository.sql_reading_source import SqlReadingSource

from conftest import MINUTE_MS, NOW_MS, make_rows


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def sqlite_engine():
    """SQLite en memoria compartida entre conexiones."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE sensor_readings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    device_id TEXT NOT NULL,
                    timestamp INTEGER NOT NULL,
                    temperature REAL,
                    humidity REAL,
                    pressure REAL,
                    light REAL
                )
                """
            )
        )
        for i, row in enumerate(make_rows([20.0 + i for i in range(5)])):
            conn.execute(
                text(
                    "INSERT INTO sensor_readings (device_id, timestamp, temperature, humidity, pressure, light) "
                    "VALUES (:d, :ts, :t, :h, :p, :l)"
                ),
                {
                    "d": "dev1",
                    "ts": row["timestamp"],
                    "t": row["Temperature"],
                    "h": row["Humidity"],
                    "p": row["Pressure"],
                    "l": None if i == 2 else row["Light"],
                },
            )
    yield engine
    engine.dispose()


# =============================================================================
# SQL
# =============================================================================

class TestSqlReadingSource:
    """Lectura acotada y cronológica."""

    def test_returns_latest_rows_in_chronological_order(self, sqlite_engine):
        rows = SqlReadingSource(sqlite_engine).fetch_recent("dev1", 3)

        assert [r["timestamp"] for r in rows] == [NOW_MS - 2 * MINUTE_MS, NOW_MS - MINUTE_MS, NOW_MS]
        assert [r["Temperature"] for r in rows] == [22.0, 23.0, 24.0]
        assert rows[0]["Light"] is None
        assert set(rows[0]) == {"timestamp", "Temperature", "Humidity", "Pressure", "Light"}

    def test_unknown_device_is_empty(self, sqlite_engine):
        assert SqlReadingSource(sqlite_engine).fetch_recent("ghost", 10) == []

    def test_missing_table_raises_source_error(self, sqlite_engine):
        source = SqlReadingSource(sqlite_engine, table="missing_table")
        with pytest.raises(ReadingSourceError):
            source.fetch_recent("dev1", 3)

    @pytest.mark.parametrize("table", ["readings; DROP TABLE x", "1abc", "a.b.c", ""])
    def test_invalid_table_name(self, sqlite_engine, table):
        with pytest.raises(ValueError):
            SqlReadingSource(sqlite_engine, table=table)

    def test_snapshot_from_sql_rows(self, sqlite_engine):
        rows = SqlReadingSource(sqlite_engine).fetch_recent("dev1", 10)
        snapshot = build_snapshot(DeviceInfo("dev1", "Room 1"), rows)

        assert snapshot.last_data_ms == NOW_MS
        assert len(snapshot.rows) == 5


# =============================================================================
# MEMORIA
# =============================================================================

class TestInMemoryReadingSource:
    """Implementación en memoria."""

    def test_sorted_and_limited(self):
        source = InMemoryReadingSource()
        rows = make_rows([1.0, 2.0, 3.0])
        source.extend("dev1", reversed(rows))

        recent = source.fetch_recent("dev1", 2)
        assert [r["Temperature"] for r in recent] == [2.0, 3.0]

    def test_rows_are_copied(self):
        source = InMemoryReadingSource()
        row = {"timestamp": NOW_MS, "Temperature": 20.0}
        source.append("dev1", row)
        row["Temperature"] = 99.0

        assert source.fetch_recent("dev1", 10)[0]["Temperature"] == 20.0

    def test_unknown_device(self):
        assert InMemoryReadingSource().fetch_recent("ghost", 10) == []

    def test_snapshot_without_rows(self):
        snapshot = build_snapshot(DeviceInfo("dev1", "Room 1"), [])
        assert snapshot.last_data_ms is None
        assert snapshot.display_name == "Room 1"
