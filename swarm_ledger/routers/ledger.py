from typing import List

from fastapi import APIRouter, Depends, Header, Path

from swarm_ledger.authentication.signature_authentication import SignatureAuthentication
from swarm_ledger.db import Session
from swarm_ledger.load_secrets import signature_header
from swarm_ledger.models.dc_models import Attack, AttackResult, HatchRequest
from swarm_ledger.models.schema_models import Hive, SacredHive, Swarm
from swarm_ledger.services.hive_query import EGGS_MAX, EGGS_MIN, HiveQuery
from swarm_ledger.services.ledger_db import LedgerService

ledger_router = APIRouter()
signature_auth = SignatureAuthentication()
ledger_service = LedgerService(Session)
hive_query = HiveQuery(Session)


def get_ledger_service() -> LedgerService:
    return ledger_service


def get_hive_query() -> HiveQuery:
    return hive_query


async def get_signature(
    signature: str | None = Header(default=None, alias=signature_header),
) -> str | None:
    return signature


class AccountAPI:
    @staticmethod
    @ledger_router.get("/airdrop/{pubkey}")
    async def airdrop(pubkey: str, service: LedgerService = Depends(get_ledger_service)):
        await service.airdrop(pubkey)
        return {}

    @staticmethod
    @ledger_router.get("/swarm/{pubkey}", response_model=Swarm)
    async def get_swarm(pubkey: str, service: LedgerService = Depends(get_ledger_service)):
        return await service.read_account(Swarm, pubkey)

    @staticmethod
    @ledger_router.post("/hatchery")
    async def hatch(
        request: HatchRequest,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        await service.hatch(request)
        return {}


class HiveAPI:
    @staticmethod
    @ledger_router.get("/hive/get/{pubkey}", response_model=Hive)
    async def get_hive(pubkey: str, service: LedgerService = Depends(get_ledger_service)):
        return await service.read_account(Hive, pubkey)

    @staticmethod
    @ledger_router.get("/hive/list/top", response_model=List[Hive])
    async def get_hive_top(query: HiveQuery = Depends(get_hive_query)):
        return await query.top_hives()

    @staticmethod
    @ledger_router.get("/hive/list/neigh/{eggs}", response_model=List[Hive])
    async def get_hive_neigh(
        eggs: int = Path(ge=EGGS_MIN, le=EGGS_MAX),
        query: HiveQuery = Depends(get_hive_query),
    ):
        return await query.neighbor_hives(eggs)

    @staticmethod
    @ledger_router.post("/hive/stake")
    async def stake_hive(
        request: Hive,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        await service.stake(request)
        return {}

    @staticmethod
    @ledger_router.post("/hive/unstake")
    async def unstake_hive(
        request: Hive,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        await service.unstake(request)
        return {}

    @staticmethod
    @ledger_router.post("/hive/attack", response_model=AttackResult)
    async def attack(
        request: Attack,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        return await service.attack(request)


class SacredHiveAPI:
    @staticmethod
    @ledger_router.get("/sacred_hive/get/{pubkey}", response_model=SacredHive)
    async def get_sacred_hive(pubkey: str, service: LedgerService = Depends(get_ledger_service)):
        return await service.read_account(SacredHive, pubkey)

    @staticmethod
    @ledger_router.get("/sacred_hive/trigger/{pubkey}")
    async def trigger(pubkey: str, service: LedgerService = Depends(get_ledger_service)):
        await service.trigger(pubkey)
        return {}

    @staticmethod
    @ledger_router.post("/sacred_hive/stake")
    async def stake_sacred_hive(
        request: SacredHive,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        await service.stake(request)
        return {}

    @staticmethod
    @ledger_router.post("/sacred_hive/unstake")
    async def unstake_sacred_hive(
        request: SacredHive,
        signature: str | None = Depends(get_signature),
        service: LedgerService = Depends(get_ledger_service),
    ):
        signature_auth.verify_request(request, signature)
        await service.unstake(request)
        return {}
