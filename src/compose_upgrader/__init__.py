"""Compose Upgrader.

Watches a data directory for ``upgrade-info.json`` and swaps a staged
``docker-compose.yml-next`` into place with a down/backup/promote/up sequence.
"""

__version__ = "0.1.0"
