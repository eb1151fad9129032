"""Runtime settings for the extractor, read from the environment.

Environment Variables:
    GO_DECLS_LOG_LEVEL: DEBUG|INFO|WARNING|ERROR (default: WARNING)
    GO_DECLS_LOG_JSON: 0|1 (default: 0, human-readable)
    GO_DECLS_LOG_FILE: path to an NDJSON log file (optional)

There is no config file: the extractor is run once per source file by the
indexing services, which pass settings through the environment.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ

        level = env.get("GO_DECLS_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        if level not in LOG_LEVELS:
            level = DEFAULT_LOG_LEVEL

        return cls(
            log_level=level,
            log_json=env.get("GO_DECLS_LOG_JSON", "0") == "1",
            log_file=env.get("GO_DECLS_LOG_FILE") or None,
        )
