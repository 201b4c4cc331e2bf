"""
Per-user like state for properties.

Each (property, user) pair moves through three states:

    absent --toggle--> liked=True --toggle--> liked=False --toggle--> liked=True

A toggle never deletes the row; only removing the property or the user
does (ON DELETE CASCADE). The flip is a single statement evaluated by the
database, so concurrent toggles on one pair are applied one after another
instead of both reading the same old value.
"""
import logging

from sqlalchemy import select, not_
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from nested_backend import db
from nested_backend.errors import StoreError
from nested_backend.models.property_like import PropertyLike

logger = logging.getLogger(__name__)

_ON_CONFLICT_INSERTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}
_ON_DUPLICATE_KEY_DIALECTS = ('mysql', 'mariadb')


def toggle_like(property_id, user_id, session=None):
    """Flip (or create) the like flag for a pair and return the new state.

    ``property_id`` and ``user_id`` must already be validated integers.
    Any database failure is rolled back and raised as StoreError.
    """
    session = session or db.session
    dialect = session.get_bind().dialect.name

    try:
        if dialect in _ON_CONFLICT_INSERTS:
            liked = _toggle_on_conflict(session, _ON_CONFLICT_INSERTS[dialect], property_id, user_id)
        elif dialect in _ON_DUPLICATE_KEY_DIALECTS:
            liked = _toggle_on_duplicate_key(session, property_id, user_id)
        else:
            liked = _toggle_with_row_lock(session, property_id, user_id)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f'Like toggle failed for property={property_id} user={user_id}: {e}')
        raise StoreError('Error processing like') from e

    logger.debug('Like toggled: property=%s user=%s liked=%s', property_id, user_id, liked)
    return {'propertyId': property_id, 'userId': user_id, 'liked': liked}


def get_like_state(property_id, user_id, session=None):
    """Return True/False for an existing row, None when the pair never interacted."""
    session = session or db.session
    return session.execute(
        select(PropertyLike.liked).filter_by(property_id=property_id, user_id=user_id)
    ).scalar_one_or_none()


def _toggle_on_conflict(session, insert, property_id, user_id):
    table = PropertyLike.__table__
    stmt = insert(table).values(property_id=property_id, user_id=user_id, liked=True)
    stmt = stmt.on_conflict_do_update(
        index_elements=[table.c.property_id, table.c.user_id],
        set_={'liked': not_(table.c.liked)},
    ).returning(table.c.liked)
    return bool(session.execute(stmt).scalar_one())


def _toggle_on_duplicate_key(session, property_id, user_id):
    table = PropertyLike.__table__
    stmt = mysql.insert(table).values(property_id=property_id, user_id=user_id, liked=True)
    stmt = stmt.on_duplicate_key_update(liked=not_(table.c.liked))
    session.execute(stmt)
    # The upsert holds the row lock until commit, so this read sees our write
    return bool(get_like_state(property_id, user_id, session))


def _toggle_with_row_lock(session, property_id, user_id):
    query = select(PropertyLike).filter_by(property_id=property_id, user_id=user_id).with_for_update()
    existing = session.execute(query).scalar_one_or_none()

    if existing is None:
        try:
            with session.begin_nested():
                session.add(PropertyLike(property_id=property_id, user_id=user_id, liked=True))
            return True
        except IntegrityError:
            # Another request created the row first; flip theirs instead
            existing = session.execute(query).scalar_one()

    existing.liked = not existing.liked
    session.flush()
    return existing.liked
