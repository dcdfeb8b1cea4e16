import json
import os

import pytest

from app_pos.app_container import AppContainer
from app_pos.exceptions import PersistenceError
from app_pos.repositories import (
    AuditRepository,
    IRecordStore,
    JsonRecordStore,
    MemoryRecordStore,
    TransactionRepository,
)


def test_missing_collection_is_empty(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    assert store.get('products') == []


def test_put_get_delete(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    store.put('products', [{'id': 'p1', 'name': 'Café'}])

    with open(os.path.join(str(tmp_path), 'products.json'), encoding='utf-8') as f:
        assert json.load(f) == [{'id': 'p1', 'name': 'Café'}]
    assert store.get('products') == [{'id': 'p1', 'name': 'Café'}]
    assert not os.path.exists(os.path.join(str(tmp_path), 'products.json.tmp'))

    store.delete('products')
    assert store.get('products') == []
    # deleting twice is fine
    store.delete('products')


def test_corrupt_file_raises(tmp_path):
    (tmp_path / 'transactions.json').write_text('{not json', encoding='utf-8')
    store = JsonRecordStore(str(tmp_path))
    with pytest.raises(PersistenceError) as exc:
        store.get('transactions')
    assert exc.value.collection == 'transactions'


def test_non_list_document_raises(tmp_path):
    (tmp_path / 'products.json').write_text('{"id": 1}', encoding='utf-8')
    with pytest.raises(PersistenceError):
        JsonRecordStore(str(tmp_path)).get('products')


def test_unserializable_put_raises_and_keeps_old_file(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    store.put('products', [{'id': 'p1'}])
    with pytest.raises(PersistenceError):
        store.put('products', [{'id': object()}])
    assert store.get('products') == [{'id': 'p1'}]


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(JsonRecordStore(str(tmp_path)), IRecordStore)
    assert isinstance(MemoryRecordStore(), IRecordStore)


def test_memory_store_copies():
    store = MemoryRecordStore()
    docs = [{'id': 'a'}]
    store.put('x', docs)
    docs[0]['id'] = 'changed'
    assert store.get('x') == [{'id': 'a'}]
    store.get('x')[0]['id'] = 'changed'
    assert store.get('x') == [{'id': 'a'}]


def test_transaction_log_is_append_only():
    repo = TransactionRepository(MemoryRecordStore())
    repo.append({'id': 'TRX1'})
    repo.append({'id': 'TRX2'})
    assert [t['id'] for t in repo.load()] == ['TRX1', 'TRX2']
    assert repo.next_transaction_id(5) == 'TRX5'
    assert repo.next_transaction_id(1) == 'TRX3'


def test_audit_log_capped_newest_first(monkeypatch):
    repo = AuditRepository(MemoryRecordStore())
    monkeypatch.setattr(AuditRepository, 'MAX_LOGS', 3)
    for i in range(5):
        repo.log('SISTEMA', 'owner', f'evento {i}')
    logs = repo.load()
    assert len(logs) == 3
    assert logs[0]['message'] == 'evento 4'


def test_full_flow_on_json_files(tmp_path):
    container = AppContainer(base_path=str(tmp_path))
    container.bootstrap()
    container.product_repo.save([
        {'id': 'p1', 'name': 'Arroz', 'price': 15000, 'wholesale_price': 0,
         'min_wholesale_qty': 0, 'category': 'Abarrotes', 'stock': 10}
    ])
    container.session_service.login('owner', 'owner123')
    container.cart_service.add_quantity(container.catalog_service.get_product('p1'), 3)
    container.checkout_service.checkout()

    # a fresh container reads everything back from disk
    reopened = AppContainer(base_path=str(tmp_path))
    assert reopened.catalog_service.get_product('p1').stock == 7
    assert len(reopened.load_transactions()) == 1
    assert reopened.load_transactions()[0].total == 45000
    assert reopened.cart_service.is_empty()
    assert not os.path.exists(os.path.join(str(tmp_path), 'cart.json'))
