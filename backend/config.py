import os
import secrets

APP_DIR = os.path.dirname(os.path.abspath(__file__))

# =========================
# Site
# =========================
SERVER_NAME = os.getenv("SERVER_NAME", "FNE Manager")
FNE_TYPE = os.getenv("FNE_TYPE", "FNE2").strip().upper()  # FNE2 | CFNE

# =========================
# Sessions / auth
# =========================
SESSION_SECRET = os.getenv("SESSION_SECRET", "") or secrets.token_urlsafe(32)
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", "86400"))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

API_KEY = os.getenv("API_KEY", "")
API_AUTH_DISABLED = os.getenv("API_AUTH_DISABLED", "false").lower() == "true"
API_KEY_HEADER = "x-dvmfne-manager-api-key"

# =========================
# FNE REST API
# =========================
FNE_REST_URL = os.getenv("FNE_REST_URL", "http://127.0.0.1:9990").rstrip("/")
FNE_REST_PASSWORD = os.getenv("FNE_REST_PASSWORD", "")
FNE_REST_TIMEOUT = float(os.getenv("FNE_REST_TIMEOUT", "10"))

# =========================
# Files
# =========================
RULE_PATH = os.getenv("RULE_PATH", "rules.yml")
STATE_DIR = os.getenv("STATE_DIR", "data")
INCLUSIONS_FILE = os.getenv("INCLUSIONS_FILE", os.path.join(STATE_DIR, "peer_map_inclusions.json"))
WATCHED_PEERS_FILE = os.getenv("WATCHED_PEERS_FILE", os.path.join(STATE_DIR, "watched_peers.json"))
USERS_FILE = os.getenv("USERS_FILE", os.path.join(STATE_DIR, "users.json"))

# =========================
# Peer map
# =========================
PEER_MAP_PRECISION = 4
