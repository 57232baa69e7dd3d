"""Random credential generation for organizer and invite tokens."""

from __future__ import annotations

import secrets

ORGANIZER_TOKEN_BYTES = 24
ROTATED_ORGANIZER_TOKEN_BYTES = 16
INVITE_TOKEN_BYTES = 16


def generate_token(nbytes: int = 32) -> str:
    # hex output keeps tokens inside [A-Za-z0-9] so participant token extraction never truncates them
    return secrets.token_hex(nbytes)


def new_organizer_token() -> str:
    return generate_token(ORGANIZER_TOKEN_BYTES)


def new_rotated_organizer_token() -> str:
    return generate_token(ROTATED_ORGANIZER_TOKEN_BYTES)


def new_invite_token() -> str:
    return generate_token(INVITE_TOKEN_BYTES)
