"""Ed25519 keys in the base58 text form players use as account ids.

Public keys travel as base58 of the 32 raw key bytes. Private keys are exported
as base58 of the 64-byte ``secret || public`` layout; a bare 32-byte seed is
accepted on import as well.
"""

import base58
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)
from pydantic import BaseModel

from swarm_ledger.errors import ValidationError

PUBLIC_KEY_LENGTH = 32
SECRET_KEY_LENGTH = 32
KEYPAIR_LENGTH = SECRET_KEY_LENGTH + PUBLIC_KEY_LENGTH
SIGNATURE_LENGTH = 64


def decode_pubkey(pubkey: str) -> Ed25519PublicKey:
    """Decode a base58 pubkey into a verifying key.

    Raises:
        ValidationError: wrong alphabet, wrong length or not an Ed25519 key.
    """
    try:
        raw = base58.b58decode(pubkey)
    except ValueError as e:
        raise ValidationError(f"pubkey is not base58: {pubkey!r}") from e
    if len(raw) != PUBLIC_KEY_LENGTH:
        raise ValidationError(f"pubkey must decode to {PUBLIC_KEY_LENGTH} bytes, got {len(raw)}")
    try:
        return Ed25519PublicKey.from_public_bytes(raw)
    except ValueError as e:
        raise ValidationError(f"pubkey is not an Ed25519 key: {pubkey!r}") from e


def pubkey_is_valid(pubkey: str) -> bool:
    try:
        decode_pubkey(pubkey)
    except ValidationError:
        return False
    return True


def generate_keypair() -> Ed25519PrivateKey:
    return Ed25519PrivateKey.generate()


def get_pubkey(private_key: Ed25519PrivateKey) -> str:
    raw = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return base58.b58encode(raw).decode()


def get_privkey(private_key: Ed25519PrivateKey) -> str:
    secret = private_key.private_bytes(Encoding.Raw, PrivateFormat.Raw, NoEncryption())
    public = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return base58.b58encode(secret + public).decode()


def load_private_key(privkey: str) -> Ed25519PrivateKey:
    """Load a private key exported by ``get_privkey`` (or a bare seed).

    Raises:
        ValidationError: undecodable text, wrong length, or a keypair whose
            public half does not belong to its secret half.
    """
    try:
        raw = base58.b58decode(privkey)
    except ValueError as e:
        raise ValidationError("private key is not base58") from e
    if len(raw) not in (SECRET_KEY_LENGTH, KEYPAIR_LENGTH):
        raise ValidationError(f"private key must decode to 32 or 64 bytes, got {len(raw)}")
    private_key = Ed25519PrivateKey.from_private_bytes(raw[:SECRET_KEY_LENGTH])
    if len(raw) == KEYPAIR_LENGTH:
        public = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
        if public != raw[SECRET_KEY_LENGTH:]:
            raise ValidationError("private key does not match its embedded public key")
    return private_key


def canonical_message(request: BaseModel) -> bytes:
    """Bytes a request signature covers: compact JSON in field declaration order."""
    return request.model_dump_json().encode()


def sign_message(private_key: Ed25519PrivateKey, message: bytes) -> str:
    return base58.b58encode(private_key.sign(message)).decode()


def sign_request(private_key: Ed25519PrivateKey, request: BaseModel) -> str:
    return sign_message(private_key, canonical_message(request))


def verify_message(pubkey: str, message: bytes, encoded_signature: str) -> bool:
    """Check a base58 signature over ``message`` against a base58 pubkey.

    Malformed keys or signatures count as a failed verification.
    """
    try:
        public_key = decode_pubkey(pubkey)
        signature = base58.b58decode(encoded_signature)
    except (ValidationError, ValueError):
        return False
    if len(signature) != SIGNATURE_LENGTH:
        return False
    try:
        public_key.verify(signature, message)
    except InvalidSignature:
        return False
    return True
