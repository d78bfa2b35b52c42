"""
validator.py — Checks that user text looks like a Solana token address.
"""

import re
from dataclasses import dataclass

from errors import ValidationError

# Mint addresses are 32-byte keys; their base58 encoding is 43 or 44 chars.
MIN_ADDRESS_LENGTH = 43
MAX_ADDRESS_LENGTH = 44
ADDRESS_PATTERN = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class AssetIdentifier:
    address: str

    def __str__(self) -> str:
        return self.address


def validate_address(text: str) -> AssetIdentifier:
    text = (text or "").strip()
    if not MIN_ADDRESS_LENGTH <= len(text) <= MAX_ADDRESS_LENGTH:
        raise ValidationError(
            text, f"expected {MIN_ADDRESS_LENGTH}-{MAX_ADDRESS_LENGTH} characters, got {len(text)}"
        )
    if not ADDRESS_PATTERN.fullmatch(text):
        raise ValidationError(text, "only letters and digits are allowed")
    return AssetIdentifier(text)
