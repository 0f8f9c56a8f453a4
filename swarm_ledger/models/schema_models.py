"""Account records and the arithmetic every stakeable record supports.

A player owns exactly three records, all keyed by the same pubkey:

- ``Swarm``: the liquid balance.
- ``Hive``: the public staked pool, raidable by other players.
- ``SacredHive``: the private staked pool, yields eggs on trigger.

Staking works identically for ``Hive`` and ``SacredHive`` because both expose
the same capability set through ``AccountRecord``: owner key, non-negativity
check, addition, negation, a view in the ``Swarm`` shape and the name of the
backing collection.
"""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class AccountRecord(BaseModel):
    collection: ClassVar[str]
    resource_fields: ClassVar[tuple[str, ...]]

    model_config = ConfigDict(from_attributes=True)

    pubkey: str

    def owner_pubkey(self) -> str:
        return self.pubkey

    def is_negative(self) -> bool:
        return any(getattr(self, field) < 0 for field in self.resource_fields)

    def add(self, addend: "AccountRecord") -> "AccountRecord":
        """Return a new record with ``addend`` added field by field.

        The result keeps this record's pubkey.
        """
        return self.model_copy(
            update={
                field: getattr(self, field) + getattr(addend, field)
                for field in self.resource_fields
            }
        )

    def negative(self) -> "AccountRecord":
        return self.model_copy(
            update={field: -getattr(self, field) for field in self.resource_fields}
        )

    def as_swarm(self) -> "Swarm":
        """View this record in the liquid-balance shape, zero-filling untracked fields."""
        return Swarm(
            pubkey=self.pubkey,
            **{field: getattr(self, field, 0) for field in Swarm.resource_fields},
        )

    @classmethod
    def empty(cls, pubkey: str) -> "AccountRecord":
        return cls(pubkey=pubkey, **{field: 0 for field in cls.resource_fields})


class Swarm(AccountRecord):
    collection = "swarms"
    resource_fields = ("sacred_queens", "queens", "guardians", "berserkers", "eggs")

    sacred_queens: int
    queens: int
    guardians: int
    berserkers: int
    eggs: int


class Hive(AccountRecord):
    collection = "hives"
    resource_fields = ("guardians", "queens", "eggs")

    guardians: int
    queens: int
    eggs: int


class SacredHive(AccountRecord):
    collection = "sacred_hives"
    resource_fields = ("sacred_queens", "eggs")

    sacred_queens: int
    eggs: int


STAKEABLE = (Hive, SacredHive)
