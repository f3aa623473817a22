"""revproof constants.

All magic numbers live here. No exceptions.
"""

# Identifier sizes in bytes
HASH_SIZE = 64           # SHA3-512 digest
TX_HASH_SIZE = 32        # ledger transaction hash
PUBLIC_KEY_SIZE = 65     # uncompressed secp256k1 point
SIGNATURE_SIZE = 65      # r (32) + s (32) + recovery byte (1)
ADDRESS_SIZE = 20        # last 20 bytes of keccak256(pubkey)
SIGNING_DIGEST_SIZE = 32 # keccak256 output fed to ECDSA

# String encoding
HEX_PREFIX = "0x"
HEX_DIGITS = frozenset("0123456789abcdef")

# secp256k1
UNCOMPRESSED_POINT_TAG = 0x04
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SCALAR_SIZE = 32

# Legacy Ethereum convention: wire recovery byte = recovery id + 27
RECOVERY_ID_OFFSET = 27
RECOVERY_ID_MAX = 3

# Revision metadata
TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
TIMESTAMP_LENGTH = 14
FILE_HASH_KEY = "file_hash"

# Receipts
RECEIPT_TYPES = ("store", "verify", "anomaly")
DEFAULT_TENANT = "default"
DEFAULT_STORAGE_PATH = "revisions.jsonl"

# Storage
UPDATE_POLL_INTERVAL = 0.25  # seconds between update_handler file polls
