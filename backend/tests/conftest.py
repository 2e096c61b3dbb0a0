import pytest

from liverisk.core.config import Settings
from liverisk.services.dispatcher import TickDispatcher
from liverisk.services.history import PriceHistoryStore


@pytest.fixture
def engine_settings() -> Settings:
    """Default engine settings, isolated from any local .env and with no mock feed."""
    return Settings(_env_file=None, enable_mock_feed=False)


@pytest.fixture
def store() -> PriceHistoryStore:
    store = PriceHistoryStore()
    store.seed("AAPL", 175.12)
    store.seed("MSFT", 360.80)
    return store


@pytest.fixture
async def dispatcher(engine_settings):
    dispatcher = TickDispatcher.from_settings(engine_settings)
    await dispatcher.start()
    yield dispatcher
    await dispatcher.stop()
