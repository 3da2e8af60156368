import logging
from pathlib import Path
from typing import Optional

from Crypto.PublicKey import ECC

from crypto.signing import Ed25519TagScheme, HmacTagScheme
from passes.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_KEY_DIR = Path("issuer_data")

def _key_paths(key_dir: Path):
    return key_dir / "issuer_sk.pem", key_dir / "issuer_pk.pem"

def generate_issuer_keypair(key_dir: Path = DEFAULT_KEY_DIR) -> None:
    sk_path, pk_path = _key_paths(key_dir)
    sk_path.parent.mkdir(parents=True, exist_ok=True)

    sk = ECC.generate(curve='Ed25519')
    pk = sk.public_key()

    sk_path.write_text(sk.export_key(format='PEM'), encoding='utf-8')
    pk_path.write_text(pk.export_key(format='PEM'), encoding='utf-8')
    logger.info("Generated Ed25519 issuer keypair in %s", key_dir)

def load_issuer_sk(key_dir: Path = DEFAULT_KEY_DIR) -> ECC.EccKey:
    sk_path, _ = _key_paths(key_dir)
    return ECC.import_key(sk_path.read_text(encoding='utf-8'))

def load_issuer_pk(key_dir: Path = DEFAULT_KEY_DIR) -> ECC.EccKey:
    _, pk_path = _key_paths(key_dir)
    return ECC.import_key(pk_path.read_text(encoding='utf-8'))

def load_shared_secret(secret: Optional[str], secret_file: Optional[str]) -> bytes:
    """PASS_SECRET wins over PASS_SECRET_FILE; one of them must be set."""
    if secret:
        return secret.encode("utf-8")
    if secret_file:
        path = Path(secret_file)
        if not path.exists():
            raise ConfigurationError(f"PASS_SECRET_FILE {path} does not exist")
        data = path.read_bytes().strip()
        if data:
            return data
        raise ConfigurationError(f"PASS_SECRET_FILE {path} is empty")
    raise ConfigurationError("No pass secret configured. Set PASS_SECRET or PASS_SECRET_FILE.")

def load_tag_scheme(cfg, for_issuing: bool = False):
    """
    Build the integrity tag scheme named by cfg.PASS_TAG_SCHEME.

    For ed25519 an issuer generates its keypair on first use; a gate
    (for_issuing=False) only loads the public key and never creates one.
    """
    scheme = (cfg.PASS_TAG_SCHEME or "hmac").lower()

    if scheme == "hmac":
        return HmacTagScheme(load_shared_secret(cfg.PASS_SECRET, cfg.PASS_SECRET_FILE))

    if scheme == "ed25519":
        key_dir = Path(cfg.ISSUER_KEY_DIR)
        sk_path, pk_path = _key_paths(key_dir)
        if for_issuing:
            if not sk_path.exists():
                generate_issuer_keypair(key_dir)
            return Ed25519TagScheme(load_issuer_pk(key_dir), load_issuer_sk(key_dir))
        if not pk_path.exists():
            raise ConfigurationError(f"Issuer public key not found at {pk_path}")
        return Ed25519TagScheme(load_issuer_pk(key_dir))

    raise ConfigurationError(f"Unknown PASS_TAG_SCHEME {cfg.PASS_TAG_SCHEME!r}")
