"""SQLAlchemy models for the transaction history database."""

from sqlalchemy import Column, Index, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from tranxhistory.database import schema

Base = declarative_base()


class TranxRow(Base):
    """One persisted ledger entry."""

    __tablename__ = schema.TABLE_NAME

    id = Column(schema.INDEX_COL, Integer, primary_key=True, autoincrement=True)
    epoch_milliseconds = Column(schema.EPOCH_MILLI_COL, Integer, nullable=False)
    amount = Column(schema.AMOUNT_COL, Integer, nullable=False)
    currency = Column(schema.CURRENCY_COL, String, nullable=False)
    currency_specifications = Column(
        schema.CURRENCY_SPEC_COL, String, nullable=False, default=""
    )
    tranx_purpose = Column(schema.TRNX_PURPOSE_COL, String, nullable=True)
    incoming = Column(schema.TRNX_INCOMING_COL, Integer, nullable=False)
    transaction_identity = Column(schema.TID_COL, String, nullable=False)

    # One index per filter dimension; AUTOINCREMENT keeps ids strictly increasing
    __table_args__ = (
        Index(schema.DATETIME_INDEX, schema.EPOCH_MILLI_COL),
        Index(schema.AMOUNT_INDEX, schema.AMOUNT_COL),
        Index(schema.DIRECTION_INDEX, schema.TRNX_INCOMING_COL),
        Index(schema.PURPOSE_INDEX, schema.TRNX_PURPOSE_COL),
        {"sqlite_autoincrement": True},
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory and make sure the schema exists."""
    engine_kwargs = {}
    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # Every thread must see the same in-memory database
            engine_kwargs["poolclass"] = StaticPool
    engine = create_engine(database_url, echo=False, **engine_kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, expire_on_commit=False)
