# Spawn point for freshly joined players.
SPAWN_X: float = 250
SPAWN_Y: float = 250

# Sender name used for join / leave announcements.
SYSTEM_SENDER = "System"

# Default player names are "Player-" + the first few characters of the connection id.
DEFAULT_NAME_PREFIX = "Player-"
DEFAULT_NAME_ID_LENGTH = 4

STATUS_TEXT = "Game and Chat Server with WebSocket"

__all__ = [
    "SPAWN_X",
    "SPAWN_Y",
    "SYSTEM_SENDER",
    "DEFAULT_NAME_PREFIX",
    "DEFAULT_NAME_ID_LENGTH",
    "STATUS_TEXT",
]
