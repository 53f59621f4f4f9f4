# tests/core/test_hashing.py
import pytest

from nodian.core.hashing import HashAlgorithm, compute_digest, hash_text, DEFAULT_ALGORITHM

# Published digests of the empty message
EMPTY_DIGESTS = {
    HashAlgorithm.CRC32: "00000000",
    HashAlgorithm.MD4: "31d6cfe0d16ae931b73c59d7e0c089c0",
    HashAlgorithm.MD5: "d41d8cd98f00b204e9800998ecf8427e",
    HashAlgorithm.SHA1: "da39a3ee5e6b4b0d3255bfef95601890afd80709",
    HashAlgorithm.SHA224: "d14a028c2a3a2bc9476102bb288234c415a2b01f828ea62ac5b3e42f",
    HashAlgorithm.SHA256: "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    HashAlgorithm.SHA384: "38b060a751ac96384cd9327eb1b1e36a21fdb71114be07434c0cc7bf63f6e1da274edebfe76f65fbd51ad2f14898b95b",
    HashAlgorithm.SHA512: "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e",
    HashAlgorithm.SHA512_224: "6ed0dd02806fa89e25de060c19d3ac86cabb87d6a0ddd05c333b84f4",
    HashAlgorithm.SHA512_256: "c672b8d1ef56ed28ab87c3622c5114069bdd3ad7b8f9737498d0c01ecef0967a",
    HashAlgorithm.SHA3_224: "6b4e03423667dbb73b6e15454f0eb1abd4597f9a1b078e3f5b5a6bc7",
    HashAlgorithm.SHA3_256: "a7ffc6f8bf1ed76651c14756a061d662f580ff4de43b49fa82d80a4b80f8434a",
    HashAlgorithm.SHA3_384: "0c63a75b845e4f7d01107d852e4c2485c51a50aaaa94fc61995e71bbee983a2ac3713831264adb47fb6bd1e058d5f004",
    HashAlgorithm.SHA3_512: "a69f73cca23a9ac5c8b567dc185a756e97c982164fe25859e0d1dcc1475c80a615b2123af1f5f94c11e3e9402c3ac558f500199d95b6d3e301758586281dcd26",
    HashAlgorithm.KECCAK_256: "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470",
    HashAlgorithm.KECCAK_512: "0eab42de4c3ceb9235fc91acffe746b29c29a8c366b7c60e4e67c466f36a4304c00fa9caf9d87976ba469bcbe06713b435f091ef2769fb160cdab33d3670680e",
}

@pytest.mark.parametrize("algorithm, expected", list(EMPTY_DIGESTS.items()), ids=lambda v: getattr(v, "value", None))
def test_empty_input_digests(algorithm, expected):
    assert compute_digest(algorithm, b"") == expected

def test_all_algorithms_are_covered():
    assert len(HashAlgorithm) == 18
    for algorithm in HashAlgorithm:
        digest = hash_text(algorithm, "nodian")
        assert digest == digest.lower()
        int(digest, 16) # Valid hex

def test_keccak_truncated_variants():
    # 224 and 384 are prefixes of the wider legacy Keccak digests
    assert compute_digest(HashAlgorithm.KECCAK_224, b"") == EMPTY_DIGESTS[HashAlgorithm.KECCAK_256][:56]
    assert compute_digest(HashAlgorithm.KECCAK_384, b"") == EMPTY_DIGESTS[HashAlgorithm.KECCAK_512][:96]
    assert len(hash_text(HashAlgorithm.KECCAK_384, "abc")) == 96

def test_known_text_vectors():
    assert hash_text(HashAlgorithm.MD5, "abc") == "900150983cd24fb0d6963f7d28e17f72"
    assert hash_text(HashAlgorithm.SHA256, "abc") == "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    assert hash_text(HashAlgorithm.CRC32, "123456789") == "cbf43926"
    assert hash_text(HashAlgorithm.CRC32, "The quick brown fox jumps over the lazy dog") == "414fa339"

def test_hash_text_uses_utf8():
    assert hash_text("SHA1", "é") == compute_digest(HashAlgorithm.SHA1, "é".encode("utf-8"))

def test_lookup_by_display_name():
    assert HashAlgorithm.from_name("sha512/256") is HashAlgorithm.SHA512_256
    assert HashAlgorithm.from_name(" Keccak-224 ") is HashAlgorithm.KECCAK_224
    assert compute_digest("md5", b"") == EMPTY_DIGESTS[HashAlgorithm.MD5]
    assert DEFAULT_ALGORITHM is HashAlgorithm.MD5

def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError, match="Unsupported hash function"):
        compute_digest("WHIRLPOOL", b"")
