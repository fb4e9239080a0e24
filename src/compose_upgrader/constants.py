"""Centralized constants for Compose Upgrader."""

# Filesystem contract
UPGRADE_INFO_FILE = "upgrade-info.json"
COMPOSE_FILE = "docker-compose.yml"
COMPOSE_NEXT_FILE = "docker-compose.yml-next"
COMPOSE_BACKUP_FILE = "docker-compose.yml-backup"

# Container orchestration
DEFAULT_COMPOSE_COMMAND = "docker-compose"
COMPOSE_DOWN_ARGS = ("down",)
COMPOSE_UP_ARGS = ("up", "-d")

# Pause after the marker appears before checking for the pending file (seconds)
DEFAULT_SETTLE_DELAY_SECONDS = 0.1

# How often the watch loop checks that the observer is still alive (seconds)
CHANNEL_POLL_INTERVAL_SECONDS = 1.0
