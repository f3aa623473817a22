"""Known-answer vectors shared across test modules."""

GOLDEN_HASH = (
    "d9e09f8529fed3b909876f34f21c7148d73de01d82f8aee43c52d9ee2601999d"
    "dcbf4593a19baac497d9d83bb98c94c2508b8157efafcd6484cbca7c4953af5f"
)
GOLDEN_PUBLIC_KEY = (
    "0x04062274ed5bba92b9ab6b8687a86d87066d3dbac83e4f7e0e996a4d163e1bb2"
    "94a75d8bbef8c9b2425bf7c020c7fe298580bc37fe8562227cb50e574dabb79701"
)
GOLDEN_TX_HASH = "0x17cb36e3abfe5cd2894f7b324102c3864d202bc7b85e4f3e5ec78ca2c3db79d7"
GOLDEN_SIGNATURES = [
    "0xf0d0cadd0c82ade49db1e3443615dca67856e94b85d5590a2970d442e09b96e6"
    "6fe9326f55a1e24b95f960f985bb524200be428d7084833db9ce7e778e2932121c",
    "0x52e60271ddeb607df95393b41d941f716de90ea7a901067b9f112aa5b737b8cc"
    "5c940b9374c950e518c06972a18feecff7b303977c0baf029b64e99b5754b4cf1c",
]

# Generator point G: public key of secret exponent 1
GENERATOR_PUBLIC_KEY = (
    "0x0479be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)
GENERATOR_ADDRESS = "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"
GENERATOR_ADDRESS_CHECKSUM = "0x7E5F4552091A69125d5DfCb7b8C2659029395Bdf"

SHA3_512_EMPTY = (
    "a69f73cca23a9ac5c8b567dc185a756e97c982164fe25859e0d1dcc1475c80a6"
    "15b2123af1f5f94c11e3e9402c3ac558f500199d95b6d3e301758586281dcd26"
)
KECCAK256_EMPTY = "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

BASE64_SAMPLE = "TmV2ZXIgZ29ubmEgZ2l2ZSB5b3UgdXAsbmV2ZXIgZ29ubmEgbGV0IHlvdSBkb3duIQ=="

TIME_STAMP = "20240101120000"

# Mixed-case renderings of the golden values: same bytes, non-canonical text
GOLDEN_HASH_MIXED = (
    "0xd9e09f8529fed3b909876F34f21c7148d73de01d82f8aEe43c52d9ee2601999d"
    "Dcbf4593a19baac497d9d83bb98c94c2508b8157efafcd6484cbca7c4953af5f"
)
GOLDEN_PUBLIC_KEY_MIXED = (
    "0x04062274ed5bba92b9Ab6b8687a86d87066d3dbac83e4f7e0e996a4d163e1bB2"
    "94a75d8bBef8c9b2425bf7c020c7Fe298580bc37fe8562227cb50e574dabb79701"
)
GOLDEN_TX_HASH_MIXED = "0x17cb36e3abfe5cd2894f7b324102C3864d202Bc7b85e4f3e5ec78ca2c3db79d7"
GOLDEN_SIGNATURE_MIXED = (
    "0xf0d0cadd0c82aDe49db1e3443615dca67856E94b85D5590a2970d442e09b96E6"
    "6fe9326f55A1e24b95f960f985bb524200be428d7084833db9ce7e778e2932121C"
)

# 5**3 + 7 = 132 is a quadratic non-residue mod the secp256k1 field prime,
# so no curve point has x == 5
NON_CURVE_X = 5
