"""
Project constants definitions
"""

# ============================================================
# Local Storage
# ============================================================

APP_NAME = "rssh"
DEFAULT_CONFIG_DIR = "~/.rss_ssh"
ALIAS_FILE_NAME = "config.json"
SETTINGS_FILE_NAME = "settings.toml"

# ============================================================
# Credential Vault
# ============================================================

VAULT_SERVICE_NAME = "rssh"

# ============================================================
# Default Values
# ============================================================

DEFAULT_SSH_PORT = 22
DEFAULT_SSH_TIMEOUT = 10
DEFAULT_TERM = "xterm-256color"
DEFAULT_TERMINAL_SIZE = (80, 24)

# ============================================================
# Shell Loop
# ============================================================

POLL_INTERVAL = 0.01  # 10ms
CHANNEL_READ_SIZE = 1024
INPUT_READ_SIZE = 1024
WRITE_RETRY_DELAY = 0.001

# ============================================================
# Transfer
# ============================================================

TRANSFER_CHUNK_SIZE = 32 * 1024
