"""Root conftest: test settings must be in the environment before messenger_service is imported."""
from __future__ import annotations

import os
from pathlib import Path

ENV_FILE = Path(__file__).resolve().parent / ".env.test"


def _load_env_file(path: Path) -> None:
    for raw in path.read_text().splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        # explicit environment wins, e.g. a CI database host
        os.environ.setdefault(key.strip(), value.strip())


if ENV_FILE.exists():
    _load_env_file(ENV_FILE)
