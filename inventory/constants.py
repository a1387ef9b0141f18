"""
Application-wide constants for the inventory store.

Centralizes names and tuning values shared by the database layer and the
application context.
"""

# =============================================================================
# Storage
# =============================================================================

# Name of the SQLite file holding all inventory items
DATABASE_NAME = "item_database"

# Default application directory under the user's home
APP_DIR_NAME = ".inventory"

# Environment variable that overrides the configured data directory
DATA_DIR_ENV_VAR = "INVENTORY_DATA_DIR"

# Journal modes accepted by SQLite's PRAGMA journal_mode
JOURNAL_MODES = ("DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF")

# =============================================================================
# Background execution
# =============================================================================

# Thread name prefixes for the write and live-query executors
WRITE_THREAD_PREFIX = "inventory-write"
QUERY_THREAD_PREFIX = "inventory-query"

# =============================================================================
# Logging
# =============================================================================

LOG_FILE_NAME = "app.log"
LOG_MAX_BYTES = 1_000_000  # ~1 MB
LOG_BACKUP_COUNT = 3
