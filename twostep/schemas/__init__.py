from .password import (
    PasswordKdfAlgo,
    SecurePasswordKdfAlgo,
    PasswordConfiguration,
    CheckPasswordSRPRequest,
    PasswordInputSettings,
)

__all__ = [
    "PasswordKdfAlgo",
    "SecurePasswordKdfAlgo",
    "PasswordConfiguration",
    "CheckPasswordSRPRequest",
    "PasswordInputSettings",
]
