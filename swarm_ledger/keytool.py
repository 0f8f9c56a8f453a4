import argparse
import sys

import pydantic
from pydantic import BaseModel

from swarm_ledger.authentication.keys import (
    canonical_message,
    generate_keypair,
    get_privkey,
    get_pubkey,
    load_private_key,
    sign_request,
)
from swarm_ledger.errors import ValidationError
from swarm_ledger.models.dc_models import Attack, HatchRequest
from swarm_ledger.models.schema_models import Hive, SacredHive

REQUEST_KINDS: dict[str, type[BaseModel]] = {
    "hive": Hive,
    "sacred_hive": SacredHive,
    "hatch": HatchRequest,
    "attack": Attack,
}


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Swarm ledger key tool")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("generate", help="Generate a new keypair")

    pubkey = commands.add_parser("pubkey", help="Print the pubkey of a private key")
    pubkey.add_argument("--privkey", type=str, help="base58 private key", required=True)

    sign = commands.add_parser("sign", help="Sign a request body")
    sign.add_argument("--privkey", type=str, help="base58 private key", required=True)
    sign.add_argument("--kind", choices=sorted(REQUEST_KINDS), help="Request type", required=True)
    sign.add_argument("--body", type=str, help="Request JSON", required=True)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = get_parser().parse_args(argv)
    if args.command == "generate":
        private_key = generate_keypair()
        print(f"privkey: {get_privkey(private_key)}")
        print(f"pubkey:  {get_pubkey(private_key)}")
        return 0

    try:
        private_key = load_private_key(args.privkey)
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.command == "pubkey":
        print(get_pubkey(private_key))
        return 0

    try:
        request = REQUEST_KINDS[args.kind].model_validate_json(args.body)
    except pydantic.ValidationError as e:
        print(f"error: invalid {args.kind} body: {e}", file=sys.stderr)
        return 1
    owner = request.owner_pubkey()
    if owner != get_pubkey(private_key):
        print(f"warning: request owner {owner} is not this key's pubkey", file=sys.stderr)
    print(canonical_message(request).decode())
    print(sign_request(private_key, request))
    return 0


if __name__ == "__main__":
    sys.exit(main())
