"""Configuration objects for the network service."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict


def _parse_pairs(raw: str, separator: str) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for item in raw.split(","):
        if separator not in item:
            continue
        key, value = item.split(separator, 1)
        key = key.strip()
        if key:
            pairs[key] = value.strip()
    return pairs


@dataclass(frozen=True)
class NetworkConfig:
    base_url: str
    headers: Dict[str, str] = field(default_factory=dict)
    query_parameters: Dict[str, str] = field(default_factory=dict)
    timeout: float = 10.0

    @classmethod
    def from_env(cls, prefix: str = "NETWORK_") -> "NetworkConfig":
        base_url = os.environ.get(f"{prefix}BASE_URL", "").strip()
        if not base_url:
            raise ValueError(f"{prefix}BASE_URL must be configured")

        headers = _parse_pairs(os.environ.get(f"{prefix}HEADERS", ""), ":")
        query = _parse_pairs(os.environ.get(f"{prefix}QUERY", ""), "=")
        api_key = os.environ.get(f"{prefix}API_KEY", "").strip()
        if api_key:
            query.setdefault("api_key", api_key)

        raw_timeout = os.environ.get(f"{prefix}TIMEOUT", "").strip() or "10.0"
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ValueError(f"{prefix}TIMEOUT must be a number") from exc

        return cls(base_url=base_url, headers=headers, query_parameters=query, timeout=timeout)


__all__ = ["NetworkConfig"]
