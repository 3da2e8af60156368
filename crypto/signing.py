from typing import Optional

from Crypto.Signature import eddsa
from Crypto.PublicKey import ECC

from crypto.encoding import b64url_decode, b64url_encode
from crypto.hashing import hmac_sha256, tags_equal
from passes.errors import ConfigurationError


def ed25519_sign(message: bytes, sk: ECC.EccKey) -> bytes:
    """
    Standard Ed25519 over the raw message bytes (RFC8032).
    DO NOT pre-hash here; the canonical pass bytes are signed as-is.
    """
    signer = eddsa.new(sk, mode="rfc8032")
    return signer.sign(message)

def ed25519_verify(message: bytes, sig: bytes, pk: ECC.EccKey) -> bool:
    try:
        verifier = eddsa.new(pk, mode="rfc8032")
        verifier.verify(message, sig)
        return True
    except ValueError:
        return False


class HmacTagScheme:
    """
    Shared-secret scheme: tag = base64url(HMAC-SHA256(secret, message)).
    Issuer and every gate hold the same secret.
    """

    name = "hmac"

    def __init__(self, secret: bytes):
        if not secret:
            raise ValueError("HMAC secret must not be empty")
        self._secret = secret

    @property
    def can_issue(self) -> bool:
        return True

    def tag(self, message: bytes) -> str:
        return b64url_encode(hmac_sha256(self._secret, message))

    def check(self, message: bytes, tag: str) -> bool:
        return tags_equal(self.tag(message), tag)


class Ed25519TagScheme:
    """
    Public-key scheme: the issuer signs, gates only need the public key.
    A scheme built without the private key can verify but not issue.
    """

    name = "ed25519"

    def __init__(self, public_key: ECC.EccKey, private_key: Optional[ECC.EccKey] = None):
        self._pk = public_key
        self._sk = private_key

    @property
    def can_issue(self) -> bool:
        return self._sk is not None

    def tag(self, message: bytes) -> str:
        if self._sk is None:
            raise ConfigurationError("this Ed25519 scheme holds no private key")
        return b64url_encode(ed25519_sign(message, self._sk))

    def check(self, message: bytes, tag: str) -> bool:
        try:
            sig = b64url_decode(tag)
        except ValueError:
            return False
        return ed25519_verify(message, sig, self._pk)
