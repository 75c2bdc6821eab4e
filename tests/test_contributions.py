import pytest
from unittest.mock import AsyncMock, MagicMock

from recycleme.core.errors import BarcodeValidationError, FetchError
from recycleme.core.models import Material, Product
from recycleme.services.contributions import Blacklister, MaterialSuggester

GLASS = Material(id=1, name="glass")
FOIL = Material(id=2, name="foil")
CARDBOARD = Material(id=3, name="cardboard")


def make_product(materials=None):
    return Product(
        ean="3017620422003",
        name="Hazelnut spread",
        url="http://shop.example.com/item/42",
        website_name="Example Shop",
        materials=materials or [],
    )


@pytest.fixture
def client():
    client = MagicMock()
    client.get_materials = AsyncMock(return_value=[GLASS, FOIL, CARDBOARD])
    client.add_package = AsyncMock()
    client.add_blacklist = AsyncMock()
    return client


@pytest.fixture
def orchestrator():
    orchestrator = MagicMock()
    orchestrator.product = make_product([GLASS, Material(id=99, name="retired")])
    orchestrator.submit = AsyncMock()
    return orchestrator


@pytest.mark.asyncio
async def test_load_options_preselects_product_materials(client, orchestrator):
    options = await MaterialSuggester(client, orchestrator).load_options()

    assert [m.name for m in options.materials] == ["glass", "foil", "cardboard"]
    # Unknown ids are not preselected
    assert options.selected_ids == [1]


@pytest.mark.asyncio
async def test_load_options_without_product(client, orchestrator):
    orchestrator.product = None

    options = await MaterialSuggester(client, orchestrator).load_options()

    assert options.selected_ids == []


@pytest.mark.asyncio
async def test_suggest_posts_and_refreshes(client, orchestrator):
    await MaterialSuggester(client, orchestrator).suggest([FOIL, CARDBOARD])

    client.add_package.assert_awaited_once_with("3017620422003", [FOIL, CARDBOARD])
    orchestrator.submit.assert_awaited_once_with("3017620422003")


@pytest.mark.asyncio
async def test_suggest_requires_selection(client, orchestrator):
    with pytest.raises(BarcodeValidationError):
        await MaterialSuggester(client, orchestrator).suggest([])

    client.add_package.assert_not_awaited()
    orchestrator.submit.assert_not_awaited()


@pytest.mark.asyncio
async def test_suggest_requires_product(client, orchestrator):
    orchestrator.product = None

    with pytest.raises(BarcodeValidationError):
        await MaterialSuggester(client, orchestrator).suggest([GLASS])

    client.add_package.assert_not_awaited()


@pytest.mark.asyncio
async def test_suggest_failure_does_not_refresh(client, orchestrator):
    client.add_package.side_effect = FetchError("db down")

    with pytest.raises(FetchError):
        await MaterialSuggester(client, orchestrator).suggest([GLASS])

    orchestrator.submit.assert_not_awaited()


@pytest.mark.asyncio
async def test_blacklist_report(client, orchestrator):
    await Blacklister(client, orchestrator).report("  Peanut butter ")

    client.add_blacklist.assert_awaited_once_with(
        name="Peanut butter",
        url="http://shop.example.com/item/42",
        ean="3017620422003",
        website="Example Shop",
    )
    orchestrator.submit.assert_awaited_once_with("3017620422003")


@pytest.mark.asyncio
async def test_blacklist_requires_name(client, orchestrator):
    with pytest.raises(BarcodeValidationError):
        await Blacklister(client, orchestrator).report("")

    client.add_blacklist.assert_not_awaited()
