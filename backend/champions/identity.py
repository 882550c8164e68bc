"""Per-request caller identity.

Every request is resolved once, before dispatch, into ``g.identity``:
``Authenticated(user_id)`` for a logged-in user, ``Guest(local_id)`` for a
device that sent a guest id header, or ``None``.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from flask import current_app, g, request
from flask_login import current_user

from champions.errors import AuthenticationRequired

_GUEST_ID_RE = re.compile(r'^[A-Za-z0-9_-]{8,64}$')


@dataclass(frozen=True)
class Authenticated:
    user_id: int


@dataclass(frozen=True)
class Guest:
    local_id: str


Identity = Union[Authenticated, Guest]


def resolve_identity() -> Optional[Identity]:
    if current_user.is_authenticated:
        return Authenticated(user_id=current_user.id)
    header = current_app.config.get('GUEST_ID_HEADER', 'X-Guest-Id')
    local_id = (request.headers.get(header) or '').strip()
    if local_id and _GUEST_ID_RE.match(local_id):
        return Guest(local_id=local_id)
    return None


def load_identity():
    g.identity = resolve_identity()


def current_identity() -> Optional[Identity]:
    return g.get('identity')


def require_user_id() -> int:
    """Return the authenticated user's id or raise a 401."""
    identity = current_identity()
    if not isinstance(identity, Authenticated):
        raise AuthenticationRequired()
    return identity.user_id


def owner_columns(identity: Optional[Identity]) -> dict:
    """Column values that attribute a row to the caller."""
    if isinstance(identity, Authenticated):
        return {'user_id': identity.user_id, 'guest_id': None}
    if isinstance(identity, Guest):
        return {'user_id': None, 'guest_id': identity.local_id}
    return {'user_id': None, 'guest_id': None}


def owns(identity: Optional[Identity], user_id, guest_id) -> bool:
    if isinstance(identity, Authenticated):
        return user_id is not None and user_id == identity.user_id
    if isinstance(identity, Guest):
        return user_id is None and guest_id == identity.local_id
    return False
