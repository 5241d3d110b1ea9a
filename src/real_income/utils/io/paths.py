from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME = "real-income"


def default_cache_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """
    Resolve o diretório de cache em disco.

    Ordem:
        1. REAL_INCOME_CACHE_DIR, se definido.
        2. $XDG_CACHE_HOME/real-income.
        3. ~/.cache/real-income.

    Parâmetro opcional:
        env: usado principalmente em testes (default: os.environ).
    """
    env = os.environ if env is None else env

    override = (env.get("REAL_INCOME_CACHE_DIR") or "").strip()
    if override:
        return Path(override).expanduser()

    xdg = (env.get("XDG_CACHE_HOME") or "").strip()
    base = Path(xdg).expanduser() if xdg else Path.home() / ".cache"
    return base / APP_DIR_NAME
