import hashlib
import hmac

def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()

def hmac_sha256(key: bytes, msg: bytes) -> bytes:
    return hmac.new(key, msg, hashlib.sha256).digest()

def tags_equal(a: str, b: str) -> bool:
    # compare_digest only takes ASCII str, and a forged tag can be anything
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
