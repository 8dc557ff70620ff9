from datetime import datetime, timedelta

import pytest

from extensions import db
from farm.history.models import InventoryHistory
from farm.history.services import TrackedField
from farm.products.models import stock_status
from farm.reports.services import build_inventory_report, summarize


def _today():
    return datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)


def _report(client, **params):
    resp = client.get('/api/reports/inventory', query_string=params)
    assert resp.status_code == 200, resp.get_json()
    return resp.get_json()


@pytest.mark.parametrize('value, expected', [
    (0, 'critical'),
    (4, 'critical'),
    (5, 'low'),
    (9, 'low'),
    (10, 'ok'),
    (250, 'ok'),
])
def test_stock_status_thresholds(value, expected):
    assert stock_status(value) == expected


def test_report_replays_wash_inventory_changes(client, make_product):
    product = make_product(washInventory='20')
    client.put(f"/api/products/{product['id']}", json={'washInventory': '30'})
    client.put(f"/api/products/{product['id']}", json={'washInventory': '25'})
    # current stock edits are not part of the wash report
    client.post('/api/inventory/adjust', json={'productId': product['id'], 'change': 40})

    body = _report(client)

    assert body['startDate'] == body['endDate'] == _today().date().isoformat()
    (line,) = body['items']
    assert line['current'] == 25
    assert line['added'] == 10
    assert line['removed'] == 5
    assert line['starting'] == 20
    assert line['stockStatus'] == 'ok'


def test_report_ignores_rows_outside_window(app, make_product):
    product = make_product(washInventory='12')
    db.session.add(InventoryHistory(
        product_id=product['id'], previous_stock=2, change=10, new_stock=12,
        field_location='Wash Inventory - North Field', changed_attribute='wash_inventory',
        updated_by='test', timestamp=_today() - timedelta(days=3),
    ))
    db.session.commit()

    (line,) = build_inventory_report(_today(), _today())

    assert (line.starting, line.added, line.removed, line.current) == (12, 0, 0, 12)

    (line,) = build_inventory_report(_today() - timedelta(days=7), _today())
    assert (line.starting, line.added, line.current) == (2, 10, 12)


def test_report_counts_untagged_rows_by_label(app, make_product):
    product = make_product(washInventory='8')
    db.session.add_all([
        InventoryHistory(product_id=product['id'], previous_stock=10, change=-2, new_stock=8,
                         field_location='Wash Inventory - North Field', updated_by='legacy'),
        InventoryHistory(product_id=product['id'], previous_stock=0, change=30, new_stock=30,
                         field_location='Stand Inventory - North Field', updated_by='legacy'),
    ])
    db.session.commit()

    (line,) = build_inventory_report(_today(), _today())

    assert line.removed == 2
    assert line.added == 0
    assert line.starting == 10


def test_report_excludes_reserved_locations_by_default(client, make_product):
    make_product(name='Salanova', fieldLocation='Side Hill 3', washInventory='3')
    make_product(name='Kitchen Herbs', fieldLocation='Kitchen', washInventory='3')

    default = _report(client)
    assert [i['name'] for i in default['items']] == ['Salanova']

    everything = _report(client, includeWholesaleKitchen='true')
    assert [i['name'] for i in everything['items']] == ['Salanova', 'Kitchen Herbs']


def test_report_single_product(client, make_product):
    make_product(name='Kale')
    chard = make_product(name='Chard')

    body = _report(client, productId=chard['id'])

    assert [i['name'] for i in body['items']] == ['Chard']


def test_report_rejects_deleted_product(client, make_product):
    product = make_product(name='Kale')
    client.delete(f"/api/products/{product['id']}")

    resp = client.get('/api/reports/inventory', query_string={'productId': product['id']})

    assert resp.status_code == 400
    assert resp.get_json()['errors'][0]['field'] == 'productId'


def test_report_non_numeric_current_counts_as_zero(app, make_product):
    make_product(washInventory='see notes')

    (line,) = build_inventory_report(_today(), _today())

    assert line.current == 0
    assert line.is_critical_stock


def test_report_other_tracked_field(client, make_product):
    product = make_product(harvestBins='1')
    client.put(f"/api/products/{product['id']}", json={'harvestBins': '4'})

    (line,) = build_inventory_report(_today(), _today(), tracked=TrackedField.HARVEST_BINS)

    assert (line.starting, line.added, line.current) == (1, 3, 4)


def test_summary_stats(client, make_product):
    make_product(name='Kale', washInventory='2')
    make_product(name='Chard', washInventory='7')
    beets = make_product(name='Beets', washInventory='30')
    client.put(f"/api/products/{beets['id']}", json={'washInventory': '35'})

    stats = _report(client)['stats']

    assert stats == {
        'totalProducts': 3,
        'totalAdded': 5,
        'totalRemoved': 0,
        'lowStockCount': 2,
        'criticalStockCount': 1,
    }


def test_summarize_empty():
    assert summarize([])['totalProducts'] == 0


def test_report_pdf_download(client, make_product):
    make_product(name='Kale & Collards', washInventory='2', fieldNotes='<tender>')

    resp = client.get('/api/reports/inventory.pdf')

    assert resp.status_code == 200
    assert resp.mimetype == 'application/pdf'
    assert resp.data.startswith(b'%PDF')
    assert 'Inventory_Report_' in resp.headers['Content-Disposition']


def test_report_pdf_without_products(client):
    resp = client.get('/api/reports/inventory.pdf', query_string={'startDate': '2024-01-01', 'endDate': '2024-01-31'})

    assert resp.status_code == 200
    assert resp.data.startswith(b'%PDF')
