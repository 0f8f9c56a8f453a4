import logging
from typing import Protocol

from swarm_ledger.authentication.keys import canonical_message, verify_message
from swarm_ledger.errors import AuthenticationError
from swarm_ledger.load_secrets import signature_header


class SignedRequest(Protocol):
    """A request payload that names the account authorising it."""

    def owner_pubkey(self) -> str: ...

    def model_dump_json(self) -> str: ...


class SignatureAuthentication:
    """Gate every mutation on an Ed25519 signature by the acting account.

    The verifying key is the request's own ``owner_pubkey()``; the signature
    arrives out of band (an HTTP header) and covers the canonical JSON of the
    request.
    """

    def __init__(self, header_name: str = signature_header):
        self.header_name = header_name

    def verify_request(self, request: SignedRequest, encoded_signature: str | None) -> str:
        """Verify the signature and return the authorised pubkey.

        Args:
            request (SignedRequest): Decoded request payload
            encoded_signature (str | None): base58 signature, None if the header was missing

        Raises:
            AuthenticationError: Missing header, malformed signature or key, or a signature
                that was not produced by the owner's private key

        Returns:
            str: The owner pubkey that signed the request
        """
        owner = request.owner_pubkey()
        if not encoded_signature:
            logging.warning(f"Rejected unsigned request for {owner}")
            raise AuthenticationError(f"missing {self.header_name} header")

        if not verify_message(owner, canonical_message(request), encoded_signature):
            logging.warning(f"Rejected request with invalid signature for {owner}")
            raise AuthenticationError("signature does not match the request owner")
        return owner
