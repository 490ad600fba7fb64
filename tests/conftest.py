"""Pytest configuration and fixtures for the storefront bot."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.bot.handlers.common import STOREFRONT_KEY
from src.services.cart_store import CartStore, counter_entry_ids
from src.services.catalog_store import CatalogStore
from src.services.storefront import create_storefront

SAMPLE_PRODUCTS = [
    {"id": "p1", "name": "FB Personal 2015", "description": "Aged account", "price": 30, "stock": 5, "platform": "facebook", "platform_category": "Personal Accounts"},
    {"id": "p2", "name": "FB Personal 2019", "description": "Fresh account", "price": 49.99, "stock": 0, "platform": "facebook", "platform_category": "Personal Accounts"},
    {"id": "p3", "name": "Business Manager", "description": "Verified BM", "price": 100, "stock": 2, "platform": "facebook", "platform_category": "Business Manager"},
    {"id": "p4", "name": "Gmail 2020", "description": "Phone verified", "price": 5, "stock": 100, "platform": "gmail", "platform_category": "Google General"},
    {"id": "p5", "name": "Ads Account", "description": "Billing history with UNLIMITED spend", "price": 250, "stock": 1, "platform": "facebook", "platform_category": "Advertising Accounts"},
]


def write_catalog(path, products, **fields):
    """Write a catalog file in the export format and return its path."""
    payload = {"shop": "test-shop", "exported_at": "2026-10-01T00:00:00Z", **fields}
    payload["products"] = products
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def catalog_path(tmp_path):
    return write_catalog(tmp_path / "products.json", SAMPLE_PRODUCTS)


@pytest.fixture()
def catalog(catalog_path):
    """A loaded catalog store over the sample products."""
    store = CatalogStore(catalog_path)
    store.load()
    return store


@pytest.fixture()
def carts(catalog):
    return CartStore(catalog, id_factory=counter_entry_ids())


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def storefront(catalog_path):
    """A storefront with a loaded catalog and deterministic cart entry ids."""
    front = create_storefront(catalog_path, id_factory=counter_entry_ids())
    front.catalog.load()
    yield front
    front.close()


@pytest.fixture()
def decoder_stub():
    """Provide a stub decoder so tests do not call external services."""

    class _StubDecoder:
        def __init__(self) -> None:
            self.replies: list[str | Exception] = []
            self.prompts: list[str] = []

        async def decode(self, prompt: str, *, max_tokens: int | None = None) -> str:
            await asyncio.sleep(0)
            self.prompts.append(prompt)
            reply = self.replies.pop(0) if self.replies else "{}"
            if isinstance(reply, Exception):
                raise reply
            return reply

    return _StubDecoder()


@pytest.fixture()
def bot_context(storefront):
    """Handler context carrying the storefront, per-user data and a mocked bot."""
    return SimpleNamespace(
        bot_data={STOREFRONT_KEY: storefront},
        user_data={},
        bot=AsyncMock(),
        error=None,
    )


def make_callback_update(data: str, user_id: int = 42, chat_id: int = 4242):
    """Build an update for an inline button press with awaitable Telegram calls."""
    query = MagicMock()
    query.data = data
    query.answer = AsyncMock()
    query.edit_message_text = AsyncMock()
    query.message = MagicMock(message_id=7)
    return SimpleNamespace(
        callback_query=query,
        message=None,
        effective_user=SimpleNamespace(id=user_id),
        effective_chat=SimpleNamespace(id=chat_id),
    )


def make_message_update(text: str, user_id: int = 42, chat_id: int = 4242):
    """Build an update for a plain text message."""
    return SimpleNamespace(
        callback_query=None,
        message=SimpleNamespace(text=text),
        effective_user=SimpleNamespace(id=user_id),
        effective_chat=SimpleNamespace(id=chat_id),
    )


@pytest.fixture()
def app(storefront):
    """A fresh FastAPI app wired to the test storefront, without a bot."""
    from src.application import create_app

    application = create_app()
    application.state.storefront = storefront
    application.state.bot_application = None
    return application


@pytest_asyncio.fixture()
async def client(app):
    """Return an HTTPX async client pointing at the FastAPI app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://testserver",
    ) as test_client:
        yield test_client


@pytest.fixture()
def sample_products():
    return [dict(product) for product in SAMPLE_PRODUCTS]


@pytest.fixture()
def catalog_writer(tmp_path):
    """Write a catalog file under the test's tmp dir: ``catalog_writer(products, name=...)``."""

    def _write(products, name="products.json", **fields):
        return write_catalog(tmp_path / name, products, **fields)

    return _write


@pytest.fixture()
def callback_update():
    return make_callback_update


@pytest.fixture()
def message_update():
    return make_message_update
