import os

from dotenv import load_dotenv

# Load from .env if it exists (useful for local development)
load_dotenv()

LOGGING_LEVEL = os.getenv("LOGGING_LEVEL", "WARNING").upper()

# Output rewriting
TEMP_SUFFIX = os.getenv("MPEGJOIN_TEMP_SUFFIX", ".mpegjoin.tmp")
COPY_CHUNK_SIZE = int(os.getenv("MPEGJOIN_COPY_CHUNK_SIZE", str(1024 * 1024)))

# Input enumeration / CLI defaults
DEFAULT_OUTPUT_NAME = "output.mp3"
INPUT_GLOB = "*.mp3"
