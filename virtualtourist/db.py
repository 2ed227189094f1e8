from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event, inspect
from sqlalchemy.exc import SQLAlchemyError
import os
import sqlite3
import logging

from virtualtourist.constants import DB_FILENAME
from virtualtourist.exceptions import PersistenceException

# Retrieve main logger
logger = logging.getLogger("main")

db = SQLAlchemy()


def database_uri(data_dir):
    return "sqlite:///" + os.path.join(data_dir, DB_FILENAME)


def _set_sqlite_pragma(dbapi_connection, connection_record):
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return

    cursor = dbapi_connection.cursor()
    # ON DELETE CASCADE from pins to photos relies on this
    cursor.execute("PRAGMA foreign_keys=ON;")
    cursor.execute("PRAGMA busy_timeout=30000;")
    cursor.close()


def init_db(app):
    """
    Create the store for the application.

    A store that cannot be created leaves the application without any saved
    data to work on, so the failure is logged and the process aborts.
    """
    # Register models on the metadata
    import virtualtourist.models  # noqa: F401

    with app.app_context():
        try:
            if not event.contains(db.engine, "connect", _set_sqlite_pragma):
                event.listen(db.engine, "connect", _set_sqlite_pragma)

            inspector = inspect(db.engine)
            if not inspector.has_table("pins"):
                logger.info("Initializing database tables...")
            db.create_all()
        except SQLAlchemyError as e:
            error = PersistenceException(f"Failed to initialize the application's saved data: {e}")
            logger.critical(f"Unresolved error {error.message}")
            raise SystemExit(error.error_number) from e


def save_context():
    """
    Commit the current session.

    Raises:
        PersistenceException: the commit failed; the session is rolled back.
    """
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceException(f"Failed to save changes: {e}") from e
