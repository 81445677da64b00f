from dotenv import load_dotenv
import os

# Load environment variables (only diagnostics are configurable)
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING").upper()

# ======== DEMO PARAMETERS ========
KEY_SIZE = 2048         # modulus length in bits
KEY_ENCODING = "pkcs1"  # PEM container for both keys
PUBLIC_EXPONENT = 65537

ALICE_MESSAGE = "Hello, Bob!"
BOB_MESSAGE = "Hello, Alice!"
# =================================
