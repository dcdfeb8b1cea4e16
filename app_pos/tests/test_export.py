import csv
import io
from datetime import datetime

from app_pos.models import CartItem, Employee, Product, Transaction
from app_pos.services.export_service import transactions_to_csv


def test_transactions_csv():
    cashier = Employee(id='e1', username='kasir', password='', name='Kasir')
    when = datetime(2024, 3, 10, 14, 30, 5)
    t = Transaction(
        id='TRX1',
        items=(
            CartItem(Product(id='a', name='Arroz', price=1000), 3),
            CartItem(Product(id='b', name='Azúcar', price=5000), 1),
        ),
        total=8000,
        timestamp=int(when.timestamp() * 1000),
        cashier=cashier,
    )

    rows = list(csv.reader(io.StringIO(transactions_to_csv([t]))))
    assert rows[0] == ['Fecha', 'No. Transaccion', 'Items', 'Total']
    assert rows[1] == ['2024-03-10 14:30:05', 'TRX1', 'Arroz (3), Azúcar (1)', '8000.00']


def test_empty_csv_has_header_only():
    rows = list(csv.reader(io.StringIO(transactions_to_csv([]))))
    assert rows == [['Fecha', 'No. Transaccion', 'Items', 'Total']]
