"""
Pytest configuration and fixtures
"""

import json
import pytest
import pytest_asyncio
import httpx
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool
from core.config import Settings
from models.base import Base
from models.traffic_index import TrafficIndexRecord

TEST_API_URL = "https://traffic.example.test/ajax/districtRank.do"


@pytest_asyncio.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine on a throwaway SQLite file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'traffic.db'}",
        echo=False,
        poolclass=NullPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def fetch_rows(test_engine):
    """Return every gz_traffic_index row, ordered by insertion"""

    async def _fetch():
        async with test_engine.connect() as conn:
            result = await conn.execute(
                select(TrafficIndexRecord.__table__).order_by(TrafficIndexRecord.id)
            )
            return result.mappings().all()

    return _fetch


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing every local artifact into tmp_path"""
    return Settings(
        _env_file=None,
        DB_CONNECTION_STRING=None,
        TRAFFIC_API_URL=TEST_API_URL,
        SNAPSHOT_PATH=str(tmp_path / "amapindex.json"),
        RUN_LOCK_PATH=str(tmp_path / "amapindex.json.lock"),
    )


@pytest.fixture
def mock_traffic_data():
    """Mock district ranking payload"""
    return [
        {"id": "440103", "index": 1.82, "name": "荔湾区", "number": 1, "speed": 24.37},
        {"id": "440104", "index": 1.76, "name": "越秀区", "number": 2, "speed": 22.9},
        {"id": "440105", "index": 1.65, "name": "海珠区", "number": 3, "speed": 27.41},
        {"id": "440106", "index": 1.58, "name": "天河区", "number": 4, "speed": 29.05},
        {"id": "440111", "index": 1.41, "name": "白云区", "number": 5, "speed": 33.6},
    ]


@pytest.fixture
def mock_payload(mock_traffic_data):
    """Raw bytes of the mock payload, as the provider would send them"""
    return json.dumps(mock_traffic_data, ensure_ascii=False).encode("utf-8")


@pytest.fixture
def make_transport():
    """Factory for an httpx.MockTransport answering every request with a fixed response"""

    def _make(status_code=200, content=b"[]", requests=None):

        def handler(request: httpx.Request) -> httpx.Response:
            if requests is not None:
                requests.append(request)
            return httpx.Response(status_code, content=content)

        return httpx.MockTransport(handler)

    return _make
