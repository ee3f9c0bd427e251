import typing

import sqlalchemy as sa  # type: ignore

from ...interfaces import CacheStore
from ...types import JSONObject

DEFAULT_TABLE_NAME = "jsonapi_entity_cache"


def build_cache_table(metadata: sa.MetaData, name: str = DEFAULT_TABLE_NAME) -> sa.Table:
    return sa.Table(
        name,
        metadata,
        sa.Column("endpoint", sa.String(2048), primary_key=True),
        sa.Column("resource", sa.JSON, nullable=False),
    )


class SQLACacheStore(CacheStore):
    """
    A :py:class:`SQLACacheStore` persists cleaned resource documents in a table,
    one row per endpoint, so that hydrated entities survive the process.
    """

    engine: sa.engine.Engine
    table: sa.Table

    def create_table(self) -> None:
        self.table.create(bind=self.engine, checkfirst=True)

    def get(self, endpoint: str) -> typing.Optional[JSONObject]:
        with self.engine.connect() as conn:
            row = conn.execute(
                sa.select(self.table.c.resource).where(self.table.c.endpoint == endpoint)
            ).first()
        return row[0] if row is not None else None

    def set(self, endpoint: str, resource: JSONObject) -> None:
        with self.engine.begin() as conn:
            conn.execute(self.table.delete().where(self.table.c.endpoint == endpoint))
            conn.execute(self.table.insert().values(endpoint=endpoint, resource=resource))

    def items(self) -> typing.Iterable[typing.Tuple[str, JSONObject]]:
        with self.engine.connect() as conn:
            rows = conn.execute(
                sa.select(self.table.c.endpoint, self.table.c.resource).order_by(
                    self.table.c.endpoint
                )
            ).fetchall()
        return [(endpoint, resource) for endpoint, resource in rows]

    def clear(self) -> None:
        with self.engine.begin() as conn:
            conn.execute(self.table.delete())

    def __init__(
        self,
        engine: sa.engine.Engine,
        metadata: typing.Optional[sa.MetaData] = None,
        table_name: str = DEFAULT_TABLE_NAME,
    ):
        self.engine = engine
        self.table = build_cache_table(
            metadata if metadata is not None else sa.MetaData(), table_name
        )
