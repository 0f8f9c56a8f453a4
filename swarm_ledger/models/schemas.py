from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.schema import Column
from sqlalchemy.types import BigInteger, String


class Base(DeclarativeBase):
    pass


class SwarmTable(Base):
    __tablename__ = "swarms"
    pubkey = Column(String(64), primary_key=True)
    sacred_queens = Column(BigInteger, nullable=False, default=0)
    queens = Column(BigInteger, nullable=False, default=0)
    guardians = Column(BigInteger, nullable=False, default=0)
    berserkers = Column(BigInteger, nullable=False, default=0)
    eggs = Column(BigInteger, nullable=False, default=0)


class HiveTable(Base):
    __tablename__ = "hives"
    pubkey = Column(String(64), primary_key=True)
    guardians = Column(BigInteger, nullable=False, default=0)
    queens = Column(BigInteger, nullable=False, default=0)
    eggs = Column(BigInteger, nullable=False, default=0, index=True)  # ranking queries


class SacredHiveTable(Base):
    __tablename__ = "sacred_hives"
    pubkey = Column(String(64), primary_key=True)
    sacred_queens = Column(BigInteger, nullable=False, default=0)
    eggs = Column(BigInteger, nullable=False, default=0)


TABLES = {
    SwarmTable.__tablename__: SwarmTable,
    HiveTable.__tablename__: HiveTable,
    SacredHiveTable.__tablename__: SacredHiveTable,
}
