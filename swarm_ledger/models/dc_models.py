from pydantic import BaseModel


class HatchRequest(BaseModel):
    """Turn ``eggs`` of the caller's liquid eggs into units."""
    pubkey: str
    eggs: int

    def owner_pubkey(self) -> str:
        return self.pubkey


class Attack(BaseModel):
    """Raid ``hive_pubkey``'s hive with ``berserkers`` from the caller's swarm.

    The attacker signs the request; the defender's key is only a target.
    """
    swarm_pubkey: str
    hive_pubkey: str
    berserkers: int

    def owner_pubkey(self) -> str:
        return self.swarm_pubkey


class AttackResult(BaseModel):
    attacker_wins: bool
    eggs_captured: int
