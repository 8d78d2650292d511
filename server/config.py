"""Configuration settings for the FileHeap development server."""

import os

from common.constants import DEFAULT_PAGE_SIZE


SERVER_HOST = os.environ.get("FILEHEAP_HOST", "0.0.0.0")

SERVER_PORT = int(os.environ.get("FILEHEAP_PORT", "8000"))

# Maximum number of files returned per manifest page.
PAGE_SIZE = int(os.environ.get("FILEHEAP_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
