import base64
import binascii
import logging
import time
from collections import namedtuple

from Crypto.PublicKey import RSA
from Crypto.Cipher import PKCS1_OAEP
from Crypto.Hash import SHA256
from Crypto.IO import PEM
from Crypto.Util.asn1 import DerSequence

from config import PUBLIC_EXPONENT
from errors import (
    DecryptionFailure,
    EncodingTooLarge,
    GenerationFailure,
    KeyFormatError,
    MalformedCiphertext,
)

logger = logging.getLogger(__name__)

# RSA only encrypts one block (at most a few hundred bytes); it is meant for
# short messages or symmetric keys, never for bulk data.

SUPPORTED_KEY_SIZES = (1024, 2048, 3072, 4096)
WEAK_KEY_SIZES = (1024,)
ENCODINGS = ("pkcs1", "pkcs8")

_DECRYPTION_FAILED = "Decryption failed: ciphertext does not match this key."

KeyPair = namedtuple("KeyPair", ["public_key", "private_key"])


# ----------------------------------------------------------------------
# 1) Keypair Generation
# ----------------------------------------------------------------------
def generate_keypair(bits=2048, encoding="pkcs1", allow_weak=False):
    """
    Generate an RSA key pair and return it as a KeyPair of PEM strings.

    By default both keys use PKCS#1 containers ("RSA PUBLIC KEY" /
    "RSA PRIVATE KEY"); encoding="pkcs8" gives SubjectPublicKeyInfo and
    PKCS#8 instead. 1024-bit keys are refused unless allow_weak=True.

    Raises GenerationFailure for unsupported sizes, unknown encodings, or
    if the library fails to produce a key.
    """
    if not isinstance(bits, int) or isinstance(bits, bool) or bits not in SUPPORTED_KEY_SIZES:
        raise GenerationFailure(
            f"Unsupported modulus length {bits}; use one of {SUPPORTED_KEY_SIZES}"
        )
    if bits in WEAK_KEY_SIZES:
        if not allow_weak:
            raise GenerationFailure(
                f"{bits}-bit RSA keys are too weak; pass allow_weak=True to use them anyway"
            )
        logger.warning("Generating weak %d-bit RSA key", bits)
    if encoding not in ENCODINGS:
        raise GenerationFailure(f"Unknown key encoding {encoding!r}; use one of {ENCODINGS}")

    t0 = time.perf_counter()
    try:
        key = RSA.generate(bits, e=PUBLIC_EXPONENT)
    except (ValueError, OSError) as e:
        raise GenerationFailure(f"RSA key generation failed: {e}") from e
    logger.debug("Generated %d-bit RSA key in %.3fs", bits, time.perf_counter() - t0)

    return KeyPair(
        public_key=export_public_key(key, encoding),
        private_key=export_private_key(key, encoding),
    )


# ----------------------------------------------------------------------
# 2) PEM Export / Import
# ----------------------------------------------------------------------
def load_key(key):
    """Return an RsaKey from a PEM string/bytes, or the key itself if already loaded."""
    if isinstance(key, RSA.RsaKey):
        return key
    try:
        return RSA.import_key(key)
    except (ValueError, IndexError, TypeError) as e:
        raise KeyFormatError(f"Could not parse RSA key: {e}") from e


def export_public_key(key, encoding="pkcs1"):
    """
    Export the public half of `key` as a PEM string.

    PyCryptodome only writes SubjectPublicKeyInfo for public keys, so the
    PKCS#1 form (SEQUENCE { n, e }) is assembled directly.
    """
    key = load_key(key)
    if encoding == "pkcs1":
        der = DerSequence([key.n, key.e]).encode()
        return PEM.encode(der, "RSA PUBLIC KEY")
    if encoding == "pkcs8":
        return key.publickey().export_key().decode("utf-8")
    raise KeyFormatError(f"Unknown key encoding {encoding!r}")


def export_private_key(key, encoding="pkcs1"):
    """Export a private key as an unencrypted PEM string (PKCS#1 or PKCS#8)."""
    key = load_key(key)
    if not key.has_private():
        raise KeyFormatError("Cannot export a private key from a public key")
    if encoding == "pkcs1":
        return key.export_key(format="PEM", pkcs=1).decode("utf-8")
    if encoding == "pkcs8":
        return key.export_key(format="PEM", pkcs=8).decode("utf-8")
    raise KeyFormatError(f"Unknown key encoding {encoding!r}")


# ----------------------------------------------------------------------
# 3) RSA Message Encryption / Decryption (with OAEP + SHA256)
# ----------------------------------------------------------------------
def max_plaintext_length(key, hash_algo=SHA256):
    """Largest plaintext, in bytes, that fits in one OAEP block for `key`."""
    key = load_key(key)
    return key.size_in_bytes() - 2 * hash_algo.digest_size - 2


def encrypt_message(public_key, plaintext, hash_algo=SHA256):
    """
    Encrypt `plaintext` (bytes, or str encoded as UTF-8) with an RSA public key.
    Returns raw ciphertext bytes, always exactly as long as the modulus.

    OAEP padding is randomized: encrypting the same plaintext twice gives
    different ciphertexts.
    """
    key = load_key(public_key)
    if isinstance(plaintext, str):
        plaintext = plaintext.encode("utf-8")

    capacity = max_plaintext_length(key, hash_algo)
    if len(plaintext) > capacity:
        raise EncodingTooLarge(
            f"Plaintext is {len(plaintext)} bytes; a {key.size_in_bits()}-bit key "
            f"holds at most {capacity} bytes"
        )

    cipher = PKCS1_OAEP.new(key, hashAlgo=hash_algo)
    try:
        return cipher.encrypt(plaintext)
    except ValueError as e:
        raise EncodingTooLarge(str(e)) from e


def decrypt_message(private_key, ciphertext, hash_algo=SHA256):
    """
    Decrypt ciphertext bytes produced by encrypt_message() with the matching
    RSA private key. Returns the original plaintext bytes.

    Raises MalformedCiphertext if the length is wrong, and DecryptionFailure
    if the key does not match or the ciphertext was tampered with.
    """
    key = load_key(private_key)
    if not key.has_private():
        raise KeyFormatError("Decryption requires a private key")

    expected = key.size_in_bytes()
    if len(ciphertext) != expected:
        raise MalformedCiphertext(
            f"Ciphertext must be {expected} bytes for this key, got {len(ciphertext)}"
        )

    cipher = PKCS1_OAEP.new(key, hashAlgo=hash_algo)
    try:
        return cipher.decrypt(ciphertext)
    except (ValueError, TypeError):
        # Same message for every cause: wrong key, bad padding, corruption.
        logger.warning(_DECRYPTION_FAILED)
        raise DecryptionFailure(_DECRYPTION_FAILED) from None


# ----------------------------------------------------------------------
# 4) Text Helpers (base64 transport)
# ----------------------------------------------------------------------
def encrypt_text(public_key, message, hash_algo=SHA256):
    """Encrypt a text message and return the ciphertext as base64 text."""
    ciphertext = encrypt_message(public_key, message.encode("utf-8"), hash_algo)
    return base64.b64encode(ciphertext).decode("ascii")


def decrypt_text(private_key, message, hash_algo=SHA256):
    """Decrypt a base64 ciphertext from encrypt_text() back to a string."""
    try:
        ciphertext = base64.b64decode(message, validate=True)
    except (binascii.Error, ValueError, TypeError) as e:
        raise MalformedCiphertext(f"Ciphertext is not valid base64: {e}") from e

    plaintext = decrypt_message(private_key, ciphertext, hash_algo)
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError:
        raise DecryptionFailure("Decrypted message is not valid UTF-8 text") from None
