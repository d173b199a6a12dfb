"""
Project constants definitions
"""

# ============================================================
# Default Values
# ============================================================

DEFAULT_HOST = "localhost"
DEFAULT_SSH_PORT = 22
DEFAULT_SSH_TIMEOUT = 10
DEFAULT_CREATE_MODE = 0o644
DEFAULT_FINGERPRINT_HASH = "md5"

# ============================================================
# Authentication Tags
# ============================================================

AUTH_TAG_PASSWORD = "PASS"
AUTH_TAG_KEY = "KEY"

# ============================================================
# Remote Commands
# ============================================================

# Sent before the handle is dropped; the result is never inspected
GRACEFUL_EXIT_COMMAND = 'echo "EXITING" && exit;'

# ============================================================
# SSH Config
# ============================================================

SSH_CONFIG_PATH = "~/.ssh/config"

# ============================================================
# Environment
# ============================================================

ENV_PREFIX = "SSHSESSION_"
