"""Salted SHA-256 hashing of signer identifiers.

The browser hashes the normalized identifier with a public salt; the server
hashes that token again with a secret salt before storing or comparing it.
The server therefore never sees a raw ID or phone number, and the stored
value cannot be precomputed without the server salt.
"""

import hashlib

from flask import current_app

from julisha.utils import normalize_identifier, normalize_phone


def hash_value(value: str, salt: str) -> str:
    """Return the hex SHA-256 digest of *value* followed by *salt*."""
    return hashlib.sha256((value + salt).encode("utf-8")).hexdigest()


class Hasher:
    """Applies the client and server halves of the double hash."""

    def __init__(self, server_salt: str, public_salt: str):
        if not server_salt:
            raise ValueError("server_salt must not be empty")
        self.server_salt = server_salt
        self.public_salt = public_salt

    @classmethod
    def from_config(cls, config=None) -> "Hasher":
        config = config if config is not None else current_app.config
        return cls(config["SERVER_SALT"], config["PUBLIC_SALT"])

    def client_hash(self, identifier: str) -> str:
        """Reproduce the browser-side hash of a raw identifier."""
        return hash_value(normalize_identifier(identifier), self.public_salt)

    def server_hash(self, token: str) -> str:
        """Second hash, applied to the client-supplied token."""
        return hash_value(token, self.server_salt)

    def phone_hash(self, phone_number: str) -> str:
        """Final stored hash for a raw phone number in any accepted format.

        Equal to server_hash() of the token the browser submits for the same
        number, so issuing and consuming a code use one hash chain.
        """
        return self.server_hash(self.client_hash(normalize_phone(phone_number)))

    def ip_hash(self, address: str) -> str:
        return hash_value(address or "", self.server_salt)
