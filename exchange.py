import logging

from config import ALICE_MESSAGE, BOB_MESSAGE, KEY_ENCODING, KEY_SIZE
from crypto_utils import decrypt_text, encrypt_text, generate_keypair

logger = logging.getLogger(__name__)


class Party:
    """
    One side of the exchange. Owns its key pair for its whole lifetime:
      - publishes `public_key` so others can encrypt messages to it
      - keeps the private key to itself and only uses it in receive()
    """

    def __init__(self, name, key_size=KEY_SIZE, encoding=KEY_ENCODING):
        self.name = name
        self._keypair = generate_keypair(key_size, encoding)
        logger.debug("%s generated a %d-bit key pair", name, key_size)

    @property
    def public_key(self):
        return self._keypair.public_key

    def encrypt_for(self, recipient, message):
        """Encrypt `message` with the recipient's public key (base64 text)."""
        return encrypt_text(recipient.public_key, message)

    def receive(self, ciphertext):
        """Decrypt a base64 message that was encrypted with our public key."""
        return decrypt_text(self._keypair.private_key, ciphertext)

    def __repr__(self):
        return f"Party({self.name!r})"


def run_exchange(key_size=KEY_SIZE, emit=print):
    """
    Alice and Bob each generate a key pair, then send each other one message.
    Every line is passed to `emit` and the four lines are returned.
    """
    alice = Party("Alice", key_size)
    bob = Party("Bob", key_size)
    lines = []

    def log(line):
        lines.append(line)
        emit(line)

    # Alice -> Bob, encrypted with Bob's public key
    encrypted = alice.encrypt_for(bob, ALICE_MESSAGE)
    log(f"Alice sends an encrypted message to Bob: {encrypted}")
    log(f'Bob receives the message from Alice: "{bob.receive(encrypted)}"')

    # Bob -> Alice, encrypted with Alice's public key
    encrypted = bob.encrypt_for(alice, BOB_MESSAGE)
    log(f"Bob sends an encrypted message to Alice: {encrypted}")
    log(f'Alice receives the message from Bob: "{alice.receive(encrypted)}"')

    return lines
