import pytest

from catalog import Product


@pytest.fixture
def apple() -> Product:
    return Product("Apple", 200)


@pytest.fixture
def banana() -> Product:
    return Product("Banana", 100)


@pytest.fixture
def red_shirt() -> Product:
    return Product("Red Shirt", 300)


@pytest.fixture
def white_shirt() -> Product:
    return Product("White Shirt", 200)


@pytest.fixture
def black_shirt() -> Product:
    return Product("Black Shirt", 300)
