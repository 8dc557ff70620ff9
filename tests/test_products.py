"""
PRODUCT TESTS
CRUD on /api/products and the ledger rows each write leaves behind.
"""

import pytest


def _history(client, **params):
    resp = client.get('/api/inventory/history', query_string=params)
    assert resp.status_code == 200
    return resp.get_json()


def test_create_product_defaults(client, make_product):
    product = make_product()

    assert product['id']
    assert product['currentStock'] == 0
    assert product['showInRetail'] is True
    assert product['showInWholesale'] is False
    assert product['showInKitchen'] is False
    assert product['stockStatus'] == 'critical'
    assert product['dateAdded']


def test_create_product_writes_seed_history_row(client, make_product):
    product = make_product(currentStock=25)

    rows = _history(client, productId=product['id'])
    assert len(rows) == 1
    assert rows[0]['previousStock'] == 0
    assert rows[0]['change'] == 25
    assert rows[0]['newStock'] == 25
    assert rows[0]['changedAttribute'] == 'current_stock'
    assert rows[0]['fieldLocation'] == 'North Field'
    assert rows[0]['productName'] == 'Head Lettuce'


def test_create_product_validation(client):
    resp = client.post('/api/products', json={'name': 'A', 'fieldLocation': ''})

    assert resp.status_code == 400
    body = resp.get_json()
    fields = {e['field'] for e in body['errors']}
    assert {'name', 'fieldLocation'} <= fields


def test_create_product_rejects_non_object_body(client):
    resp = client.post('/api/products', json=['not', 'an', 'object'])
    assert resp.status_code == 400


def test_create_product_rejects_object_values(client):
    resp = client.post('/api/products', json={'name': {'a': 1, 'b': 2}, 'fieldLocation': 'North Field'})

    assert resp.status_code == 400
    assert [e['field'] for e in resp.get_json()['errors']] == ['name']
    assert client.get('/api/products').get_json() == []


def test_update_rejects_nested_lists(client, make_product):
    product = make_product()

    resp = client.put(f"/api/products/{product['id']}", json={'unit': [['lbs']]})

    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'unit'


def test_current_stock_out_of_range(client, make_product):
    product = make_product(currentStock=2)

    resp = client.put(f"/api/products/{product['id']}", json={'currentStock': 10**20})

    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'currentStock'
    assert client.get(f"/api/products/{product['id']}").get_json()['currentStock'] == 2


def test_update_with_huge_quantity_text_skips_history(client, make_product):
    product = make_product(washInventory='3')

    resp = client.put(f"/api/products/{product['id']}", json={'washInventory': '99999999999999999999'})

    assert resp.status_code == 200
    assert resp.get_json()['washInventory'] == '99999999999999999999'
    assert len(_history(client, productId=product['id'])) == 1


def test_get_missing_product_is_404(client):
    resp = client.get('/api/products/999')

    assert resp.status_code == 404
    assert resp.get_json() == {'message': 'Product not found'}


@pytest.mark.filterwarnings('error::sqlalchemy.exc.LegacyAPIWarning')
def test_product_lookups_use_current_session_api(client, make_product):
    product = make_product()

    assert client.get(f"/api/products/{product['id']}").status_code == 200
    assert client.put(f"/api/products/{product['id']}", json={'unit': 'lbs'}).status_code == 200
    assert client.post('/api/inventory/adjust', json={'productId': product['id'], 'change': 1}).status_code == 200
    assert client.post(f"/api/products/{product['id']}/move", json={'position': 1}).status_code == 200
    assert client.delete(f"/api/products/{product['id']}").status_code == 204
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_update_tracked_field_writes_one_row(client, make_product):
    product = make_product(washInventory='10')

    resp = client.put(f"/api/products/{product['id']}", json={'washInventory': '4'})
    assert resp.status_code == 200
    assert resp.get_json()['washInventory'] == '4'

    rows = [r for r in _history(client, productId=product['id']) if r['changedAttribute'] == 'wash_inventory']
    assert len(rows) == 1
    assert rows[0]['previousStock'] == 10
    assert rows[0]['change'] == -6
    assert rows[0]['newStock'] == 4
    assert rows[0]['fieldLocation'] == 'Wash Inventory - North Field'
    assert rows[0]['location'] == 'North Field'


def test_update_several_fields_writes_row_per_field(client, make_product):
    product = make_product(standInventory='5', harvestBins='2')

    client.put(f"/api/products/{product['id']}", json={
        'standInventory': '8',
        'harvestBins': '1',
        'currentStock': 12,
        'updatedBy': 'Sam',
    })

    rows = _history(client, productId=product['id'])
    by_tag = {r['changedAttribute']: r for r in rows[:3]}
    assert set(by_tag) == {'stand_inventory', 'harvest_bins', 'current_stock'}
    assert by_tag['stand_inventory']['change'] == 3
    assert by_tag['harvest_bins']['change'] == -1
    assert by_tag['current_stock']['change'] == 12
    assert all(r['updatedBy'] == 'Sam' for r in by_tag.values())


def test_update_without_quantity_change_writes_nothing(client, make_product):
    product = make_product(washInventory='7')

    client.put(f"/api/products/{product['id']}", json={'name': 'Romaine', 'washInventory': '7.0'})

    rows = _history(client, productId=product['id'])
    assert len(rows) == 1  # seed row only


def test_update_with_non_numeric_quantity_skips_history(client, make_product):
    product = make_product(washInventory='3')

    resp = client.put(f"/api/products/{product['id']}", json={'washInventory': 'a few'})

    assert resp.status_code == 200
    assert resp.get_json()['washInventory'] == 'a few'
    assert len(_history(client, productId=product['id'])) == 1


def test_blank_quantity_counts_as_zero(client, make_product):
    product = make_product(cropNeeds='15')

    client.put(f"/api/products/{product['id']}", json={'cropNeeds': ''})

    rows = [r for r in _history(client, productId=product['id']) if r['changedAttribute'] == 'crop_needs']
    assert rows[0]['change'] == -15
    assert rows[0]['newStock'] == 0


def test_partial_update_keeps_unsent_flags(client, make_product):
    product = make_product(showInKitchen=True)

    resp = client.put(f"/api/products/{product['id']}", json={'name': 'Red Leaf'})

    body = resp.get_json()
    assert body['name'] == 'Red Leaf'
    assert body['showInKitchen'] is True
    assert body['showInRetail'] is True


def test_partial_update_validates_sent_fields_only(client, make_product):
    product = make_product()

    resp = client.put(f"/api/products/{product['id']}", json={'name': ''})
    assert resp.status_code == 400

    resp = client.put(f"/api/products/{product['id']}", json={'unit': 'lbs'})
    assert resp.status_code == 200


def test_delete_product_keeps_history(client, make_product):
    product = make_product(currentStock=3)

    resp = client.delete(f"/api/products/{product['id']}")
    assert resp.status_code == 204
    assert client.get(f"/api/products/{product['id']}").status_code == 404

    rows = _history(client)
    assert len(rows) == 1
    assert rows[0]['productName'] == 'Unknown Product'


def test_low_stock_list(client, make_product):
    make_product(name='Kale', currentStock=3)
    make_product(name='Chard', currentStock=8)
    make_product(name='Beets', currentStock=40)

    resp = client.get('/api/products/low-stock')

    names = [p['name'] for p in resp.get_json()]
    assert names == ['Kale', 'Chard']


def test_retail_notes_change_triggers_notification(client, make_product, monkeypatch):
    calls = []
    monkeypatch.setattr(
        'farm.products.routes.notify_retail_notes_changed',
        lambda product, previous: calls.append((product.name, previous)),
    )
    product = make_product(retailNotes='Tender')

    client.put(f"/api/products/{product['id']}", json={'retailNotes': 'Tender'})
    assert calls == []

    client.put(f"/api/products/{product['id']}", json={'retailNotes': 'Bolting soon'})
    assert calls == [('Head Lettuce', 'Tender')]
