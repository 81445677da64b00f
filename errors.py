class RSADemoError(Exception):
    """Base class for every error raised by the RSA exchange demo."""


class GenerationFailure(RSADemoError):
    """Key pair could not be generated (bad parameters or library failure)."""


class EncodingTooLarge(RSADemoError):
    """Plaintext does not fit in a single RSA-OAEP block for the given key."""


class DecryptionFailure(RSADemoError):
    """Ciphertext did not decrypt under the given private key."""


class MalformedCiphertext(DecryptionFailure):
    """Ciphertext is structurally invalid (wrong length, bad base64)."""


class KeyFormatError(RSADemoError):
    """Key could not be parsed, or is the wrong kind for the operation."""
