from __future__ import annotations

import hashlib
import json
import math
from typing import Any, Mapping, Optional

from chronicles.application.services.random_source import SeededRandomSource


SEED_MODULUS = 2**32
SETTINGS_NAMESPACE = "chronicles.rng"


def _sort_token(item: Any) -> str:
    return json.dumps(item, sort_keys=True, separators=(",", ":"), default=str)


def _canonical(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError("Seed context cannot contain non-finite floats")
    if isinstance(value, Mapping):
        return {str(key): _canonical(value[key]) for key in sorted(value, key=str)}
    if isinstance(value, (set, frozenset)):
        return sorted((_canonical(item) for item in value), key=_sort_token)
    if isinstance(value, (list, tuple)):
        return [_canonical(item) for item in value]
    return value


def derive_seed(namespace: str, context: Mapping[str, Any]) -> int:
    """Stable 32-bit seed for a namespace and context, independent of key and set ordering."""
    body = _sort_token({"namespace": namespace, "context": _canonical(context)})
    return int(hashlib.sha256(body.encode("utf-8")).hexdigest(), 16) % SEED_MODULUS


def seed_from_setting(raw: Optional[str]) -> Optional[int]:
    """Integer settings are used as-is; any other text is hashed into a seed."""
    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if text.lstrip("-").isdigit():
        return int(text)
    return derive_seed(SETTINGS_NAMESPACE, {"seed": text})


def source_for(namespace: str, context: Mapping[str, Any]) -> SeededRandomSource:
    return SeededRandomSource(derive_seed(namespace, context))
