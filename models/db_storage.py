"""
SQLAlchemy storage engine.

All collections share one table; each row is one record snapshot:
  catalog_records(collection, position, payload JSON)
Saving a collection replaces all of its rows in a single commit.
"""
import logging

from sqlalchemy import Column, Integer, JSON, MetaData, String, Table, create_engine, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import scoped_session, sessionmaker

from models.errors import StorageError

logger = logging.getLogger(__name__)

metadata = MetaData()

catalog_records = Table(
    "catalog_records",
    metadata,
    Column("collection", String(32), primary_key=True),
    Column("position", Integer, primary_key=True),
    Column("payload", JSON, nullable=False),
)


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url="sqlite:///catalog.db", echo=False):
        """Initialize engine for the given URL"""
        self.__engine = create_engine(database_url, echo=echo)

    def __str__(self) -> str:
        return f"db:{self.__engine.url.render_as_string(hide_password=True)}"

    def reload(self):
        """Create tables and start session"""
        try:
            metadata.create_all(self.__engine)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot initialize database: {e}") from e
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def save(self, collection: str, records: list):
        """Replace every row of a collection"""
        session = self.__session
        try:
            session.execute(delete(catalog_records).where(catalog_records.c.collection == collection))
            if records:
                session.execute(
                    insert(catalog_records),
                    [
                        {"collection": collection, "position": position, "payload": record}
                        for position, record in enumerate(records)
                    ],
                )
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            raise StorageError(f"Cannot save {collection}: {e}") from e
        logger.debug("Saved %d %s record(s)", len(records), collection)

    def load(self, collection: str) -> list:
        """Records of a collection in stored order; empty if none"""
        stmt = (
            select(catalog_records.c.payload)
            .where(catalog_records.c.collection == collection)
            .order_by(catalog_records.c.position)
        )
        try:
            records = list(self.__session.execute(stmt).scalars())
        except SQLAlchemyError as e:
            self.__session.rollback()
            raise StorageError(f"Cannot load {collection}: {e}") from e
        logger.debug("Loaded %d %s record(s)", len(records), collection)
        return records

    def close(self):
        """Remove session"""
        if self.__session is not None:
            self.__session.remove()
