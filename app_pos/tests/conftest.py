import os
import sys

import pytest

# ensure project root is on sys.path when running from tests/ folder
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from app_pos import config
from app_pos.app_container import AppContainer
from app_pos.repositories import MemoryRecordStore


def product_doc(pid, name, price, stock, wholesale_price=0, min_wholesale_qty=0, category='General'):
    return {
        'id': pid,
        'name': name,
        'price': price,
        'wholesale_price': wholesale_price,
        'min_wholesale_qty': min_wholesale_qty,
        'category': category,
        'stock': stock,
    }


@pytest.fixture(autouse=True)
def profiling_logs(tmp_path, monkeypatch):
    # keep performance logs out of the package folder
    monkeypatch.setattr(config, 'LOGS_DIR', str(tmp_path / 'logs'))


@pytest.fixture
def store():
    return MemoryRecordStore({
        'products': [
            product_doc('p1', 'Arroz', 15000, 10, category='Abarrotes'),
            product_doc('p2', 'Azúcar', 12000, 20, wholesale_price=10000, min_wholesale_qty=5, category='Abarrotes'),
            product_doc('p3', 'Jabón', 5000, 2, category='Limpieza'),
        ]
    })


@pytest.fixture
def container(store):
    c = AppContainer(store=store)
    c.bootstrap()
    return c


@pytest.fixture
def logged_in(container):
    container.session_service.login('owner', 'owner123')
    return container
