"""Receipt emission for revproof operations.

Functions:
    canonical_json: Deterministic JSON encoding (sorted keys, no whitespace)
    emit_receipt: Emit receipt with required fields to stdout
"""
import hashlib
import json
from datetime import datetime, timezone

from revproof.config import settings as settings_module

from .constants import RECEIPT_TYPES
from .errors import StopRule

REQUIRED_FIELDS = ["receipt_type", "ts", "tenant_id", "payload_hash"]


def canonical_json(data: object) -> bytes:
    """Encode data as canonical JSON bytes.

    Keys sorted lexicographically, compact separators, UTF-8.
    Pure function with no side effects.
    """
    return json.dumps(
        data, sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def emit_receipt(receipt_type: str, data: dict, tenant_id: str | None = None) -> dict:
    """Emit a receipt with standard required fields.

    Prints JSON to stdout with flush=True unless receipts are disabled
    in the active settings. The receipt is returned either way.

    Args:
        receipt_type: Type of receipt (store, verify, anomaly)
        data: Receipt payload data
        tenant_id: Tenant identifier (default: from settings)

    Returns:
        Complete receipt dict with receipt_type, ts, tenant_id, payload_hash

    Raises:
        StopRule: If receipt_type is not a known receipt type
    """
    if receipt_type not in RECEIPT_TYPES:
        raise StopRule(f"Unknown receipt_type: {receipt_type}")

    settings = settings_module.get_settings()
    tenant_id = data.get("tenant_id", tenant_id or settings.tenant_id)

    receipt = {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "tenant_id": tenant_id,
        "payload_hash": hashlib.sha3_512(canonical_json(data)).hexdigest(),
        **data
    }

    if settings.receipts_enabled:
        print(json.dumps(receipt, sort_keys=True), flush=True)

    return receipt
