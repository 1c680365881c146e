import os

# --- Protocol ---
PROTOCOL_VERSION = os.getenv("WTTP_PROTOCOL", "WTTP/2.0")
URL_SCHEME = os.getenv("WTTP_SCHEME", "wttp")

# --- Gateway ---
GATEWAY_HOST = os.getenv("WTTP_GATEWAY_HOST", "127.0.0.1")
GATEWAY_PORT = int(os.getenv("WTTP_GATEWAY_PORT", "8000"))
LOG_LEVEL = os.getenv("WTTP_LOG_LEVEL", "INFO")

# "package.module:callable" returning a ready WttpClient.
CLIENT_FACTORY = os.getenv("WTTP_CLIENT_FACTORY", "")
