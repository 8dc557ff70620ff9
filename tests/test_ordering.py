import pytest

from farm.api import ApiValidationError
from farm.ordering.services import move_product, ordered_ids, rank_map


def _order(client):
    return client.get('/api/products/order').get_json()['productIds']


def test_rank_map_prunes_and_appends():
    ranks = rank_map([7, 3, 99, 3], [3, 5, 7, 1])

    assert ordered_ids(ranks) == [7, 3, 1, 5]
    assert sorted(ranks.values()) == [1, 2, 3, 4]


def test_rank_map_without_stored_order_uses_ids():
    assert ordered_ids(rank_map(None, [4, 2, 9])) == [2, 4, 9]


@pytest.mark.parametrize('product_id, position, expected', [
    (4, 1, [4, 1, 2, 3, 5]),
    (1, 5, [2, 3, 4, 5, 1]),
    (2, 4, [1, 3, 4, 2, 5]),
    (3, 3, [1, 2, 3, 4, 5]),
])
def test_move_product_shifts_only_the_span(product_id, position, expected):
    ranks = rank_map(None, [1, 2, 3, 4, 5])

    moved = move_product(ranks, product_id, position)

    assert ordered_ids(moved) == expected
    assert sorted(moved.values()) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize('position', [0, 6, -1])
def test_move_product_out_of_range(position):
    ranks = rank_map(None, [1, 2, 3, 4, 5])

    with pytest.raises(ApiValidationError) as exc:
        move_product(ranks, 2, position)

    assert exc.value.errors[0]['message'] == 'Please enter a number between 1 and 5'


def test_move_endpoint_reorders_product_list(client, make_product):
    a, b, c = (make_product(name=n)['id'] for n in ('Kale', 'Chard', 'Beets'))

    resp = client.post(f'/api/products/{c}/move', json={'position': 1})

    assert resp.status_code == 200
    assert resp.get_json()['productIds'] == [c, a, b]
    assert [p['id'] for p in client.get('/api/products').get_json()] == [c, a, b]


def test_move_endpoint_rejects_bad_position(client, make_product):
    pid = make_product()['id']

    resp = client.post(f'/api/products/{pid}/move', json={'position': 3})

    assert resp.status_code == 400
    assert resp.get_json()['message'] == 'Invalid row number'


def test_save_order_then_new_and_deleted_products(client, make_product):
    a, b, c = (make_product(name=n)['id'] for n in ('Kale', 'Chard', 'Beets'))

    resp = client.put('/api/products/order', json={'productIds': [b, c, a, 999]})
    assert resp.get_json()['productIds'] == [b, c, a]

    d = make_product(name='Leeks')['id']
    assert _order(client) == [b, c, a, d]

    client.delete(f'/api/products/{c}')
    assert _order(client) == [b, a, d]
    assert client.get('/api/settings/inventoryRowOrder').get_json()['value'] == [b, a]


def test_malformed_stored_order_falls_back_to_ids(client, make_product):
    a, b = (make_product(name=n)['id'] for n in ('Kale', 'Chard'))
    client.post('/api/settings/inventoryRowOrder', json={'value': 'not-a-list'})

    assert _order(client) == [a, b]
    assert [p['id'] for p in client.get('/api/products').get_json()] == [a, b]
