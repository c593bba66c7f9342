import pytest
from datetime import datetime

from pos import create_app
from pos.exceptions import PersistenceError
from pos.services.pos_service import PointOfSale
from pos.services.storage_service import MemoryKeyValueStore


class FlakyKeyValueStore(MemoryKeyValueStore):
    """In-memory store whose writes can be made to fail per key."""

    def __init__(self):
        super().__init__()
        self.fail_keys = set()
        self.writes = []

    def set(self, key, value):
        if key in self.fail_keys:
            raise PersistenceError(f'simulated failure writing {key}')
        self.writes.append(key)
        super().set(key, value)


class FrozenClock:
    """Callable clock returning a settable datetime."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now


TEST_CONFIG = {
    'RECEIPT_PREFIX': 'RCP',
    'LOW_STOCK_THRESHOLD': 10,
    'TOP_PRODUCTS_LIMIT': 5,
    'DEFAULT_TAX_ENABLED': True,
    'DEFAULT_TAX_RATE': '20',
    'DEFAULT_TAX_NAME': 'Tax',
    'BUSINESS_NAME': 'Test Store',
}


@pytest.fixture(scope='function')
def app():
    """Create application instance for testing (fresh in-memory database)."""
    app = create_app('config.TestingConfig')
    return app


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def pos(app):
    """PointOfSale backed by the test database."""
    return app.extensions['pos']


@pytest.fixture(scope='function')
def backend():
    """Key-value backend that can simulate write failures."""
    return FlakyKeyValueStore()


@pytest.fixture(scope='function')
def clock():
    return FrozenClock(datetime(2026, 10, 19, 12, 0, 0))


@pytest.fixture(scope='function')
def memory_pos(backend, clock):
    """PointOfSale on the flaky in-memory backend with a frozen clock."""
    return PointOfSale(backend, TEST_CONFIG, clock=clock)


@pytest.fixture(scope='function')
def burger(pos):
    """Product priced 10 with 10 units in stock."""
    return pos.add_product({
        'name': 'Burger',
        'price': '10.00',
        'category': 'food',
        'stock': 10,
        'image': 'https://example.com/burger.jpg',
        'barcode': '1234567890123',
    })


@pytest.fixture(scope='function')
def soda(pos):
    """Product priced 5 with 20 units in stock."""
    return pos.add_product({
        'name': 'Soda',
        'price': '5.00',
        'category': 'drinks',
        'stock': 20,
    })
