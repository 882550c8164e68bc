"""Star shop: catalog, purchases and item use.

Balance and inventory move together in one transaction; the debit is a
conditional UPDATE on ``stars >= total`` so concurrent purchases from the
same account cannot overspend.
"""

from typing import Dict, List

from flask import current_app
from sqlalchemy.exc import IntegrityError

from champions import db
from champions.errors import BusinessRuleViolation, InsufficientFunds, NotFound, ValidationError
from champions.models import User, UserItem

THEMES = {
    'outdoor': 'Outdoor Theme',
    'pirate': 'Pirate Theme',
    'space': 'Space Theme',
    'soccer': 'Soccer Theme',
    'skiing': 'Skiing Theme',
    'basketball': 'Basketball Theme',
    'robot': 'Robot Theme',
    'unicorn': 'Unicorn Theme',
}
DEFAULT_THEME = 'default'
THEME_COST = 10

SHOP_ITEMS: Dict[str, dict] = {
    'do_over': {
        'name': 'Do Over',
        'description': 'Restart a game without losing your progress',
        'cost': 5,
        'kind': 'consumable',
    },
    'second_chance': {
        'name': '2nd Chance',
        'description': 'Retry the words you missed at the end of a game',
        'cost': 3,
        'kind': 'consumable',
    },
}
SHOP_ITEMS.update({
    f'theme_{theme_id}': {
        'name': name,
        'description': f'Unlock the {name}',
        'cost': THEME_COST,
        'kind': 'theme',
        'themeId': theme_id,
        'maxQuantity': 1,
    }
    for theme_id, name in THEMES.items()
})


def get_item(item_id) -> dict:
    item = SHOP_ITEMS.get(item_id)
    if not item:
        raise NotFound('Item not found')
    return item


def _quantity(value) -> int:
    if value is None:
        return 1
    if not isinstance(value, int) or isinstance(value, bool) or value < 1:
        raise ValidationError('Quantity must be a positive integer', field='quantity')
    return value


def inventory_for(user_id: int) -> List[UserItem]:
    return UserItem.query.filter_by(user_id=user_id).order_by(UserItem.item_id).all()


def item_quantity(user_id: int, item_id: str) -> int:
    owned = UserItem.query.filter_by(user_id=user_id, item_id=item_id).first()
    return owned.quantity if owned else 0


def purchase(user_id: int, item_id, quantity=None) -> dict:
    item = get_item(item_id)
    quantity = _quantity(quantity)
    max_quantity = item.get('maxQuantity')
    if max_quantity is not None and item_quantity(user_id, item_id) + quantity > max_quantity:
        raise BusinessRuleViolation(f"You already own {item['name']}")
    total_cost = item['cost'] * quantity

    debited = User.query.filter(User.id == user_id, User.stars >= total_cost).update(
        {User.stars: User.stars - total_cost}, synchronize_session=False
    )
    if not debited:
        db.session.rollback()
        user = db.session.get(User, user_id, populate_existing=True)
        balance = user.stars if user else 0
        current_app.logger.info(f"[purchase-rejected] user={user_id} item={item_id} qty={quantity} cost={total_cost} balance={balance}")
        raise InsufficientFunds(balance=balance, required=total_cost)

    owned = UserItem.query.filter_by(user_id=user_id, item_id=item_id).with_for_update().first()
    if owned:
        # Re-checked under the row lock; a losing concurrent purchase rolls back its debit
        guard = [UserItem.id == owned.id]
        if max_quantity is not None:
            guard.append(UserItem.quantity <= max_quantity - quantity)
        stocked = UserItem.query.filter(*guard).update(
            {UserItem.quantity: UserItem.quantity + quantity}, synchronize_session=False
        )
        if not stocked:
            db.session.rollback()
            raise BusinessRuleViolation(f"You already own {item['name']}")
    else:
        db.session.add(UserItem(user_id=user_id, item_id=item_id, quantity=quantity))
    try:
        db.session.commit()
    except IntegrityError:
        # Another purchase created the inventory row first
        db.session.rollback()
        raise BusinessRuleViolation('Your items changed while buying, please try again')

    user = db.session.get(User, user_id, populate_existing=True)
    new_quantity = item_quantity(user_id, item_id)
    current_app.logger.info(f"[purchase] user={user_id} item={item_id} qty={quantity} balance={user.stars}")
    return {'success': True, 'newStarBalance': user.stars, 'newItemQuantity': new_quantity}


def use_item(user_id: int, item_id, quantity=None) -> dict:
    item = get_item(item_id)
    if item['kind'] != 'consumable':
        raise BusinessRuleViolation(f"{item['name']} cannot be used up")
    quantity = _quantity(quantity)
    used = UserItem.query.filter(
        UserItem.user_id == user_id,
        UserItem.item_id == item_id,
        UserItem.quantity >= quantity,
    ).update({UserItem.quantity: UserItem.quantity - quantity}, synchronize_session=False)
    if not used:
        db.session.rollback()
        raise BusinessRuleViolation('Not enough items', details={'remainingQuantity': item_quantity(user_id, item_id)})
    db.session.commit()
    remaining = item_quantity(user_id, item_id)
    current_app.logger.info(f"[use-item] user={user_id} item={item_id} qty={quantity} remaining={remaining}")
    return {'success': True, 'remainingQuantity': remaining}


def unlocked_themes(user_id: int) -> List[str]:
    owned = {i.item_id for i in inventory_for(user_id) if i.quantity > 0}
    return [DEFAULT_THEME] + [t for t in THEMES if f'theme_{t}' in owned]


def catalog() -> Dict[str, dict]:
    return {item_id: dict(item) for item_id, item in SHOP_ITEMS.items()}
