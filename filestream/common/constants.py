"""Constants used throughout the application."""

# Default data root, relative to the working directory
DEFAULT_DATA_ROOT = "./data"

# Default static frontend directory
DEFAULT_FRONTEND_DIR = "./frontend"

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080

# Copy buffer for archive entries (1 MiB)
DEFAULT_BUFFER_SIZE = 1024 * 1024

# Download name for multi-file archives
ARCHIVE_NAME = "download.zip"

INDEX_FILE = "index.html"
