from os import getenv

VERSION: str = "0.0.5"

PORT: int = int(getenv("PORT", 8000))

# When serving a local directory during development, we want it to be
# reachable from everywhere.
HOST: str = getenv("HOST", "0.0.0.0")  # nosec: B104

LOG_REQUESTS: bool = getenv("WEBFS_LOG_REQUESTS", "1") == "1"

# One of the `LogLevel` names (Debug, Info, Warning, Error…)
LOG_LEVEL: str = getenv("WEBFS_LOG_LEVEL", "Info")

DEFAULT_ENCODING: str = "utf-8"

# EOF
