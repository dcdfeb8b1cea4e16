from app_pos.app_container import AppContainer


def get_product(container, pid):
    return container.catalog_service.get_product(pid)


def line_for(cart, pid):
    for item in cart.items():
        if item.product_id == pid:
            return item
    return None


def test_add_one_inserts_then_increments(logged_in):
    cart = logged_in.cart_service
    arroz = get_product(logged_in, 'p1')

    r = cart.add_one(arroz)
    assert r['ok']
    assert line_for(cart, 'p1').quantity == 1

    cart.add_one(arroz)
    assert line_for(cart, 'p1').quantity == 2
    assert len(cart.items()) == 1


def test_add_one_stops_at_stock(logged_in):
    cart = logged_in.cart_service
    jabon = get_product(logged_in, 'p3')  # stock 2

    assert cart.add_one(jabon)['ok']
    assert cart.add_one(jabon)['ok']
    r = cart.add_one(jabon)
    assert not r['ok']
    assert 'error' in r
    assert line_for(cart, 'p3').quantity == 2


def test_add_one_rejects_out_of_stock(logged_in):
    logged_in.product_repo.update_product('p1', dict(get_product(logged_in, 'p1').to_dict(), stock=0))
    cart = logged_in.cart_service

    r = cart.add_one(get_product(logged_in, 'p1'))
    assert not r['ok']
    assert cart.is_empty()


def test_add_quantity_partial_when_stock_runs_out(logged_in):
    cart = logged_in.cart_service
    r = cart.add_quantity(get_product(logged_in, 'p3'), 5)
    assert r['ok']
    assert r['added'] == 2
    assert 'notice' in r
    assert line_for(cart, 'p3').quantity == 2


def test_adjust_never_exceeds_stock_and_zero_removes(logged_in):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p3'))

    r = cart.adjust_quantity('p3', 5)
    assert not r['ok']
    assert line_for(cart, 'p3').quantity == 1

    r = cart.adjust_quantity('p3', 1)
    assert r['ok']
    assert line_for(cart, 'p3').quantity == 2

    # clamps at zero and removes the line
    r = cart.adjust_quantity('p3', -10)
    assert r['ok']
    assert line_for(cart, 'p3') is None
    assert cart.is_empty()


def test_adjust_uses_live_stock(logged_in):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p1'))

    # stock drops after the product went into the cart
    logged_in.product_repo.update_product('p1', dict(get_product(logged_in, 'p1').to_dict(), stock=1))
    r = cart.adjust_quantity('p1', 1)
    assert not r['ok']
    assert line_for(cart, 'p1').quantity == 1


def test_adjust_unknown_line(logged_in):
    r = logged_in.cart_service.adjust_quantity('nope', 1)
    assert not r['ok']


def test_wholesale_flag_follows_threshold(logged_in):
    cart = logged_in.cart_service
    azucar = get_product(logged_in, 'p2')  # 12000, wholesale 10000 from 5

    cart.add_quantity(azucar, 4)
    assert line_for(cart, 'p2').is_wholesale is False
    assert cart.total() == 48000

    cart.add_one(azucar)
    assert line_for(cart, 'p2').is_wholesale is True
    assert cart.total() == 50000

    cart.adjust_quantity('p2', -1)
    assert line_for(cart, 'p2').is_wholesale is False
    assert cart.total() == 48000


def test_wholesale_override(logged_in):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p2'))

    cart.adjust_quantity('p2', 1, wholesale_override=True)
    line = line_for(cart, 'p2')
    assert line.quantity == 2
    assert line.is_wholesale is True
    assert cart.total() == 20000


def test_set_quantity(logged_in):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p2'))

    assert cart.set_quantity('p2', 6)['ok']
    assert line_for(cart, 'p2').quantity == 6
    assert line_for(cart, 'p2').is_wholesale is True

    assert not cart.set_quantity('p2', 21)['ok']
    assert line_for(cart, 'p2').quantity == 6

    assert cart.set_quantity('p2', 0)['ok']
    assert cart.is_empty()


def test_summary_projection(logged_in):
    cart = logged_in.cart_service
    cart.add_quantity(get_product(logged_in, 'p1'), 2)
    cart.add_quantity(get_product(logged_in, 'p2'), 5)

    s = cart.summary()
    assert s['lines'] == 2
    assert s['units'] == 7
    assert s['total'] == 30000 + 50000
    assert s['items'][1]['unit_price'] == 10000
    assert s['items'][1]['subtotal'] == 50000


def test_mutations_persist_snapshot(logged_in, store):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p1'))

    snapshot = store.get('cart')
    assert len(snapshot) == 1
    assert snapshot[0]['owner_id'] == 'owner1'
    assert snapshot[0]['items'][0]['quantity'] == 1

    cart.clear()
    assert store.get('cart') == []


def test_save_failure_keeps_memory_state(logged_in, store):
    cart = logged_in.cart_service
    store.fail_writes.add('cart')

    r = cart.add_one(get_product(logged_in, 'p1'))
    assert r['ok']
    assert 'warning' in r
    assert line_for(cart, 'p1').quantity == 1


def test_snapshot_reloads_for_same_identity(logged_in, store):
    logged_in.cart_service.add_quantity(get_product(logged_in, 'p1'), 3)

    other = AppContainer(store=store)
    assert line_for(other.cart_service, 'p1').quantity == 3


def test_snapshot_of_other_identity_loads_empty(container, store):
    container.session_service.login('owner', 'owner123')
    store.put('cart', [{
        'owner_id': 'someone-else',
        'items': [{'product': get_product(container, 'p1').to_dict(), 'quantity': 2, 'is_wholesale': False}],
    }])

    assert container.cart_service.is_empty()


def test_unparsable_snapshot_loads_empty(container, store):
    container.session_service.login('owner', 'owner123')
    store.put('cart', [{'owner_id': 'owner1', 'items': [{'bogus': True}]}])

    assert container.cart_service.is_empty()


def test_logout_wipes_cart(logged_in, store):
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p1'))

    logged_in.session_service.logout()
    assert cart.is_empty()
    assert store.get('cart') == []


def test_login_as_other_employee_wipes_cart(logged_in):
    logged_in.employee_service.add_employee(
        {'username': 'kasir', 'password': 'kasir1', 'name': 'Kasir', 'role': 'shopkeeper'}
    )
    cart = logged_in.cart_service
    cart.add_one(get_product(logged_in, 'p1'))

    logged_in.session_service.login('kasir', 'kasir1')
    assert cart.is_empty()


def test_add_quantity_writes_snapshot_once(logged_in, store, monkeypatch):
    cart = logged_in.cart_service
    writes = []
    original_put = store.put

    def counting_put(collection, docs):
        if collection == 'cart':
            writes.append(docs)
        original_put(collection, docs)

    monkeypatch.setattr(store, 'put', counting_put)
    r = cart.add_quantity(get_product(logged_in, 'p2'), 15)

    assert r['added'] == 15
    assert len(writes) == 1
    assert line_for(cart, 'p2').is_wholesale is True


def test_add_quantity_single_warning_on_save_failure(logged_in, store):
    store.fail_writes.add('cart')
    r = logged_in.cart_service.add_quantity(get_product(logged_in, 'p1'), 5)
    assert r['ok']
    assert isinstance(r['warning'], str)
    assert line_for(logged_in.cart_service, 'p1').quantity == 5


def test_add_quantity_when_line_already_full(logged_in):
    cart = logged_in.cart_service
    jabon = get_product(logged_in, 'p3')  # stock 2
    cart.add_quantity(jabon, 2)

    r = cart.add_quantity(jabon, 3)
    assert not r['ok']
    assert line_for(cart, 'p3').quantity == 2
