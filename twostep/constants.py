"""
Protocol constants.

These values are fixed by the wire formats and must match the server and
any other client implementation byte for byte.
"""

# The SRP password KDF tag implies this iteration count; the wire format has
# no field for it.
SRP_PBKDF2_ITERATIONS = 100000

# The secure-value PBKDF2 tag ("pbkdf2_hmac_sha512_iter100000") is fixed too.
SECURE_PBKDF2_ITERATIONS = 100000

# Every password update appends this many fresh random bytes to the salt.
SALT_SUFFIX_LENGTH = 32

# g is carried as a 32-bit signed integer on the wire.
SRP_G_LENGTH = 4

# Notification key
NOTIFICATION_KEYCHAIN_KEY = "master-notification-secret"
NOTIFICATION_KEY_LENGTH = 256
NOTIFICATION_KEY_ID_LENGTH = 8
NOTIFICATION_MSG_KEY_LENGTH = 16
NOTIFICATION_HEADER_LENGTH = NOTIFICATION_KEY_ID_LENGTH + NOTIFICATION_MSG_KEY_LENGTH

# Offset into the key material for incoming payloads (server -> client).
NOTIFICATION_KEY_OFFSET = 8
