# nodian/core/hashing.py
import hashlib
import zlib
from enum import Enum
from typing import Callable, Dict

from Crypto.Hash import MD4, SHA512, keccak
from loguru import logger


class HashAlgorithm(str, Enum):
    """Digest algorithms offered by the hash tool, valued by display name."""
    CRC32 = "CRC-32"
    MD4 = "MD4"
    MD5 = "MD5"
    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    SHA512_224 = "SHA512/224"
    SHA512_256 = "SHA512/256"
    SHA3_224 = "SHA3-224"
    SHA3_256 = "SHA3-256"
    SHA3_384 = "SHA3-384"
    SHA3_512 = "SHA3-512"
    KECCAK_224 = "Keccak-224"
    KECCAK_256 = "Keccak-256"
    KECCAK_384 = "Keccak-384"
    KECCAK_512 = "Keccak-512"

    @classmethod
    def from_name(cls, name: str) -> "HashAlgorithm":
        """Look up an algorithm by display name, ignoring case."""
        wanted = name.strip().lower()
        for algorithm in cls:
            if algorithm.value.lower() == wanted:
                return algorithm
        raise ValueError(f"Unsupported hash function: {name}")


DEFAULT_ALGORITHM = HashAlgorithm.MD5


def _crc32(data: bytes) -> str:
    return f"{zlib.crc32(data) & 0xFFFFFFFF:08x}"

def _hashlib(name: str) -> Callable[[bytes], str]:
    return lambda data: hashlib.new(name, data).hexdigest()

def _md4(data: bytes) -> str:
    return MD4.new(data).hexdigest()

def _sha512_truncated(bits: str) -> Callable[[bytes], str]:
    return lambda data: SHA512.new(data, truncate=bits).hexdigest()

def _keccak(digest_bits: int, keep_bytes: int | None = None) -> Callable[[bytes], str]:
    """Legacy Keccak; keep_bytes truncates the wider digest (Keccak-224/384)."""
    def digest(data: bytes) -> str:
        raw = keccak.new(data=data, digest_bits=digest_bits).digest()
        if keep_bytes is not None:
            raw = raw[:keep_bytes]
        return raw.hex()
    return digest


_DIGESTERS: Dict[HashAlgorithm, Callable[[bytes], str]] = {
    HashAlgorithm.CRC32: _crc32,
    HashAlgorithm.MD4: _md4,
    HashAlgorithm.MD5: _hashlib("md5"),
    HashAlgorithm.SHA1: _hashlib("sha1"),
    HashAlgorithm.SHA224: _hashlib("sha224"),
    HashAlgorithm.SHA256: _hashlib("sha256"),
    HashAlgorithm.SHA384: _hashlib("sha384"),
    HashAlgorithm.SHA512: _hashlib("sha512"),
    HashAlgorithm.SHA512_224: _sha512_truncated("224"),
    HashAlgorithm.SHA512_256: _sha512_truncated("256"),
    HashAlgorithm.SHA3_224: _hashlib("sha3_224"),
    HashAlgorithm.SHA3_256: _hashlib("sha3_256"),
    HashAlgorithm.SHA3_384: _hashlib("sha3_384"),
    HashAlgorithm.SHA3_512: _hashlib("sha3_512"),
    HashAlgorithm.KECCAK_224: _keccak(256, keep_bytes=28),
    HashAlgorithm.KECCAK_256: _keccak(256),
    HashAlgorithm.KECCAK_384: _keccak(512, keep_bytes=48),
    HashAlgorithm.KECCAK_512: _keccak(512),
}


def compute_digest(algorithm: HashAlgorithm | str, data: bytes) -> str:
    """Returns the lowercase hex digest of `data` for the given algorithm."""
    if not isinstance(algorithm, HashAlgorithm):
        algorithm = HashAlgorithm.from_name(algorithm)
    digest = _DIGESTERS[algorithm](data)
    logger.debug(f"Computed {algorithm.value} digest over {len(data)} bytes.")
    return digest

def hash_text(algorithm: HashAlgorithm | str, text: str) -> str:
    """Hashes the UTF-8 encoding of `text`."""
    return compute_digest(algorithm, text.encode("utf-8"))
