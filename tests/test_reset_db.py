import reset_db
from farm.fields.models import FieldLocation
from farm.history.models import InventoryHistory
from farm.products.models import Product


def test_reset_database_empties_tables_and_reseeds(app, make_product):
    make_product(name='Kale')

    tables = reset_db.reset_database()

    assert {'products', 'inventory_history', 'field_locations'} <= set(tables)
    assert Product.query.count() == 0
    assert InventoryHistory.query.count() == 0
    assert FieldLocation.query.count() == len(app.config['DEFAULT_FIELD_LOCATIONS'])


def test_reset_database_without_seed(app):
    reset_db.reset_database(seed=False)

    assert FieldLocation.query.count() == 0


def test_main_aborts_without_confirmation(app, make_product, monkeypatch, capsys):
    make_product(name='Kale')
    monkeypatch.setattr('app.create_app', lambda: app)
    monkeypatch.setattr('builtins.input', lambda prompt: 'no')

    assert reset_db.main([]) == 1
    assert 'Aborted' in capsys.readouterr().out
    assert Product.query.count() == 1


def test_main_with_yes(app, make_product, monkeypatch, capsys):
    make_product(name='Kale')
    monkeypatch.setattr('app.create_app', lambda: app)

    assert reset_db.main(['--yes', '--no-seed']) == 0
    assert 'Recreated' in capsys.readouterr().out
    assert Product.query.count() == 0
    assert FieldLocation.query.count() == 0
