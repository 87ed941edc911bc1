from sqlalchemy import Table, Column, Integer, DateTime, MetaData, String

metadata = MetaData()

links = Table(
    "links",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("code", String(length=16), nullable=False, unique=True, index=True),
    Column("original_url", String(length=2048), nullable=False, index=True),
    Column("visits", Integer, nullable=False, default=0, server_default="0"),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
