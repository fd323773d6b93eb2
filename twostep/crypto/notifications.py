"""
Push notification payload encryption.

Payloads are produced by the server with the account's notification key and
delivered through a third-party push transport, so the client decrypts them
locally without a network round trip.

Wire format (fixed, unversioned):
    [8 bytes key id][16 bytes msg_key][AES-256-IGE body]

Body plaintext:
    [int32 little-endian length][payload][random padding to 16 bytes]

The msg_key is SHA256(key[96:128] ++ plaintext)[8:24]. It selects the AES
key/IV and is the only integrity check: a wrong key, corruption and tampering
all look the same.
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from twostep.constants import (
    NOTIFICATION_HEADER_LENGTH,
    NOTIFICATION_KEY_ID_LENGTH,
    NOTIFICATION_KEY_OFFSET,
)
from twostep.crypto.errors import IntegrityCheckError
from twostep.crypto.primitives import (
    AES_BLOCK_SIZE,
    aes_ige_decrypt,
    aes_ige_encrypt,
    generate_random_bytes,
    secure_compare,
    sha1_digest,
    sha256_digest,
)
from twostep.crypto.srp import RandomBytes

logger = logging.getLogger(__name__)

# Highest key byte read by the key schedule and integrity check.
MIN_KEY_MATERIAL_LENGTH = 88 + NOTIFICATION_KEY_OFFSET + 32


def notification_key_id(data: bytes) -> bytes:
    """Key id: the last 8 bytes of SHA1(key material)."""
    return sha1_digest(data)[-NOTIFICATION_KEY_ID_LENGTH:]


@dataclass(frozen=True)
class NotificationKey:
    """
    Account notification key.

    The id is always recomputed from the key material and cannot be passed
    in, so it can never disagree with the material it names.

    Attributes:
        data: Secret key material (256 bytes when generated locally)
        id: SHA1(data)[-8:]
    """

    data: bytes
    id: bytes = field(init=False, repr=False)

    def __post_init__(self):
        if not self.data:
            raise ValueError("Key material cannot be empty")
        object.__setattr__(self, "id", notification_key_id(self.data))

    def __repr__(self) -> str:
        return f"NotificationKey(id={self.id.hex()})"

    def to_dict(self) -> dict:
        """JSON-serializable form with base64 fields, as read by the push extension."""
        return {
            "id": base64.b64encode(self.id).decode("ascii"),
            "data": base64.b64encode(self.data).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, value: dict) -> "NotificationKey":
        """
        Rebuild a key from `to_dict` output.

        Raises:
            ValueError: If fields are missing, not base64, or the stored id
                does not match the key material
        """
        try:
            data = base64.b64decode(value["data"], validate=True)
            stored_id = base64.b64decode(value["id"], validate=True)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid notification key: {e}") from e

        key = cls(data=data)
        if stored_id != key.id:
            raise ValueError("Notification key id does not match key material")
        return key


def _derive_aes_key_iv(key_data: bytes, msg_key: bytes) -> Tuple[bytes, bytes]:
    x = NOTIFICATION_KEY_OFFSET
    sha256_a = sha256_digest(msg_key + key_data[x:x + 36])
    sha256_b = sha256_digest(key_data[40 + x:40 + x + 36] + msg_key)
    aes_key = sha256_a[0:8] + sha256_b[8:24] + sha256_a[24:32]
    aes_iv = sha256_b[0:8] + sha256_a[8:24] + sha256_b[24:32]
    return aes_key, aes_iv


def _msg_key(key_data: bytes, plaintext: bytes) -> bytes:
    x = NOTIFICATION_KEY_OFFSET
    return sha256_digest(key_data[88 + x:88 + x + 32] + plaintext)[8:24]


def _open_payload(key: NotificationKey, data: bytes) -> bytes:
    if len(key.data) < MIN_KEY_MATERIAL_LENGTH:
        raise IntegrityCheckError("key material too short")
    if len(data) < NOTIFICATION_HEADER_LENGTH:
        raise IntegrityCheckError("payload too short")
    if data[:NOTIFICATION_KEY_ID_LENGTH] != key.id:
        raise IntegrityCheckError("key id mismatch")

    msg_key = data[NOTIFICATION_KEY_ID_LENGTH:NOTIFICATION_HEADER_LENGTH]
    aes_key, aes_iv = _derive_aes_key_iv(key.data, msg_key)

    try:
        decrypted = aes_ige_decrypt(data[NOTIFICATION_HEADER_LENGTH:], aes_key, aes_iv)
    except ValueError as e:
        raise IntegrityCheckError(f"undecryptable body: {e}") from e

    if len(decrypted) < 4:
        raise IntegrityCheckError("decrypted body too short")

    length = int.from_bytes(decrypted[:4], "little", signed=True)
    if length < 0 or length > len(decrypted) - 4:
        raise IntegrityCheckError("length prefix out of range")

    if not secure_compare(_msg_key(key.data, decrypted), msg_key):
        raise IntegrityCheckError("msg_key mismatch")

    return decrypted[4:4 + length]


def decrypt_notification_payload(key: NotificationKey, data: bytes) -> Optional[bytes]:
    """
    Decrypt a push payload.

    Never raises. Truncation, a foreign key id and an integrity mismatch all
    return None; the reason is logged at debug level only.

    Args:
        key: Account notification key
        data: Raw payload bytes from the push transport

    Returns:
        Plaintext bytes, or None if the payload is undecryptable
    """
    try:
        return _open_payload(key, data)
    except IntegrityCheckError as e:
        logger.debug("Dropping notification payload for key %s: %s", key.id.hex(), e)
        return None


def encrypt_notification_payload(
    key: NotificationKey,
    plaintext: bytes,
    random_bytes: RandomBytes = generate_random_bytes,
) -> bytes:
    """
    Build a payload that decrypt_notification_payload accepts.

    Mirror of the server-side construction, used to generate test vectors
    and to exercise the decryptor end to end.

    Args:
        key: Account notification key
        plaintext: Bytes to deliver (may be empty)
        random_bytes: Source of padding bytes (default: CSPRNG)

    Returns:
        key.id ++ msg_key ++ ciphertext

    Raises:
        ValueError: If the key material is too short for the key schedule
    """
    if len(key.data) < MIN_KEY_MATERIAL_LENGTH:
        raise ValueError(f"Key material must be at least {MIN_KEY_MATERIAL_LENGTH} bytes")

    inner = len(plaintext).to_bytes(4, "little", signed=True) + plaintext
    padding = -len(inner) % AES_BLOCK_SIZE
    if padding:
        inner += random_bytes(padding)

    msg_key = _msg_key(key.data, inner)
    aes_key, aes_iv = _derive_aes_key_iv(key.data, msg_key)
    return key.id + msg_key + aes_ige_encrypt(inner, aes_key, aes_iv)
