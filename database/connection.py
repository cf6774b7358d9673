"""
Database connection management.
Handles connection lifecycle, initialization, transactions, and teardown.
"""

import logging
import sqlite3
from contextlib import contextmanager

from flask import g, current_app

from utils.errors import BookingError, PersistenceError

logger = logging.getLogger(__name__)


def get_db():
    """
    Get the request/app-context database connection with row factory.

    The connection runs in autocommit mode; writes are grouped explicitly
    with ``transaction()``.

    Returns:
        sqlite3.Connection: Database connection object
    """
    if 'db' not in g:
        db_path = current_app.config.get('DATABASE_PATH', 'instance/camrent.db')
        g.db = sqlite3.connect(
            db_path,
            timeout=current_app.config.get('DATABASE_TIMEOUT', 5.0),
            isolation_level=None,
            check_same_thread=False
        )
        g.db.row_factory = sqlite3.Row
        # Enable foreign key constraints
        g.db.execute('PRAGMA foreign_keys = ON')
        # Enable WAL mode for better concurrency
        g.db.execute('PRAGMA journal_mode = WAL')
    return g.db


def close_db(e=None):
    """
    Close database connection.

    Args:
        e: Exception if any (from Flask teardown context)
    """
    db = g.pop('db', None)
    if db is not None:
        db.close()


def mark_changed(*paths: str) -> None:
    """Record store paths touched by the current transaction."""
    g.setdefault('changed_paths', set()).update(paths)


@contextmanager
def transaction():
    """
    Run a block as one atomic write.

    Takes the SQLite write lock up front (BEGIN IMMEDIATE) so read-check-write
    sequences inside the block cannot interleave with another writer. Nested
    use joins the outer transaction. On commit, change notifications are
    published for every path passed to ``mark_changed``.

    Yields:
        sqlite3.Cursor: Cursor bound to the transaction

    Raises:
        PersistenceError: If SQLite fails; the transaction is rolled back
    """
    db = get_db()

    if db.in_transaction:
        yield db.cursor()
        return

    cursor = db.cursor()
    try:
        cursor.execute('BEGIN IMMEDIATE')
    except sqlite3.Error as e:
        logger.error(f'Could not start transaction: {e}')
        raise PersistenceError('Could not start a database transaction') from e

    g.changed_paths = set()
    try:
        yield cursor
        db.commit()
    except BookingError:
        db.rollback()
        g.pop('changed_paths', None)
        raise
    except sqlite3.Error as e:
        db.rollback()
        g.pop('changed_paths', None)
        logger.error(f'Transaction rolled back: {e}', exc_info=True)
        raise PersistenceError(f'Database write failed: {e}') from e
    except Exception:
        db.rollback()
        g.pop('changed_paths', None)
        raise

    changed = g.pop('changed_paths', set())
    feed = current_app.extensions.get('change_feed')
    if feed is not None and changed:
        feed.publish(sorted(changed))


def init_db():
    """
    Initialize database: drop existing tables, create new schema, insert seed data.
    WARNING: This will delete all existing data!
    """
    from database.schema import drop_tables, create_tables, create_indexes
    from database.seed import seed_database

    db = get_db()

    db.execute('BEGIN')

    # Drop existing tables (in reverse order of dependencies)
    drop_tables(db)

    # Create all tables
    create_tables(db)

    # Create indexes
    create_indexes(db)

    # Insert seed data
    seed_database(db)

    db.commit()
    logger.info('Database initialized')

    # Every path was replaced wholesale
    feed = current_app.extensions.get('change_feed')
    if feed is not None:
        feed.publish(['bookings', 'cameras'])
