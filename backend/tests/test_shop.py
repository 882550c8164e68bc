import pytest

from champions import db
from champions.models import User
from champions.services import shop as shop_service


def _fund(c, stars):
    with c.application.app_context():
        User.query.filter_by(id=c.user['id']).update({User.stars: stars})
        db.session.commit()


def _balance(c):
    with c.application.app_context():
        return db.session.get(User, c.user['id']).stars


def _owned(c, item_id):
    with c.application.app_context():
        return shop_service.item_quantity(c.user['id'], item_id)


def test_catalog_lists_consumables_and_themes(client):
    items = client.get('/api/user-items/list').get_json()
    assert items['do_over']['kind'] == 'consumable'
    assert items['theme_pirate']['maxQuantity'] == 1
    assert len([i for i in items.values() if i['kind'] == 'theme']) == len(shop_service.THEMES)


def test_purchase_debits_and_stocks(alice):
    _fund(alice, 12)
    res = alice.post('/api/user-items/purchase', json={'itemId': 'do_over', 'quantity': 2})
    assert res.status_code == 200
    assert res.get_json() == {'success': True, 'newStarBalance': 2, 'newItemQuantity': 2}

    inventory = alice.get('/api/user-items').get_json()
    assert inventory['stars'] == 2
    assert [(i['itemId'], i['quantity']) for i in inventory['items']] == [('do_over', 2)]


def test_exact_balance_buys_item(alice, monkeypatch):
    monkeypatch.setitem(shop_service.SHOP_ITEMS['second_chance'], 'cost', 10)
    _fund(alice, 10)
    res = alice.post('/api/user-items/purchase', json={'itemId': 'second_chance'})
    assert res.status_code == 200
    assert res.get_json()['newStarBalance'] == 0
    assert res.get_json()['newItemQuantity'] == 1


def test_insufficient_funds_leaves_balance(alice):
    _fund(alice, 4)
    res = alice.post('/api/user-items/purchase', json={'itemId': 'do_over'})
    assert res.status_code == 409
    body = res.get_json()
    assert body['error'] == 'Not enough stars'
    assert body['details'] == {'balance': 4, 'required': 5}
    assert _balance(alice) == 4
    assert _owned(alice, 'do_over') == 0


@pytest.mark.parametrize('payload,status', [
    ({'itemId': 'do_over', 'quantity': 0}, 400),
    ({'itemId': 'do_over', 'quantity': 'two'}, 400),
    ({'itemId': 'golden_pencil'}, 404),
    ({}, 400),
])
def test_purchase_validation(alice, payload, status):
    _fund(alice, 100)
    assert alice.post('/api/user-items/purchase', json=payload).status_code == status
    assert _balance(alice) == 100


def test_use_item(alice):
    _fund(alice, 10)
    alice.post('/api/user-items/purchase', json={'itemId': 'do_over', 'quantity': 2})
    res = alice.post('/api/user-items/use', json={'itemId': 'do_over'})
    assert res.get_json() == {'success': True, 'remainingQuantity': 1}
    res = alice.post('/api/user-items/use', json={'itemId': 'do_over', 'quantity': 2})
    assert res.status_code == 409
    assert res.get_json()['details'] == {'remainingQuantity': 1}


def test_theme_unlock_and_select(alice):
    _fund(alice, 25)
    assert alice.post('/api/user-items/purchase', json={'itemId': 'theme_space'}).status_code == 200
    assert alice.post('/api/user-items/purchase', json={'itemId': 'theme_space'}).status_code == 409
    assert alice.post('/api/user-items/use', json={'itemId': 'theme_space'}).status_code == 409
    assert _balance(alice) == 15

    res = alice.patch('/api/user', json={'selectedTheme': 'space'})
    assert res.status_code == 200
    assert res.get_json()['selectedTheme'] == 'space'
    assert alice.get('/api/user').get_json()['unlockedThemes'] == ['default', 'space']


def test_inventory_requires_login(client):
    assert client.get('/api/user-items').status_code == 401
    assert client.post('/api/user-items/purchase', json={'itemId': 'do_over'}).status_code == 401


def test_owned_theme_is_not_charged_twice(alice, monkeypatch):
    _fund(alice, 30)
    assert alice.post('/api/user-items/purchase', json={'itemId': 'theme_robot'}).status_code == 200
    # A second request that read the inventory before the first one committed
    monkeypatch.setattr(shop_service, 'item_quantity', lambda user_id, item_id: 0)
    res = alice.post('/api/user-items/purchase', json={'itemId': 'theme_robot'})
    assert res.status_code == 409
    monkeypatch.undo()
    assert _balance(alice) == 20
    assert _owned(alice, 'theme_robot') == 1
