from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from real_income.utils.io.paths import default_cache_dir
from real_income.utils.io.storage import ByteStorage, LocalFileStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = True
    cache_dir: Optional[str] = None

    def resolved_dir(self) -> Path:
        return Path(self.cache_dir) if self.cache_dir else default_cache_dir()


class DiskCache:
    """
    Memoização imutável de payloads brutos: lê primeiro, grava no miss.

    - Sem TTL e sem checagem de frescor: a mesma chave devolve sempre os mesmos bytes.
    - Falha ao gravar não derruba a operação (cache é best-effort).
    - Chave = nome do arquivo relativo ao diretório do storage.
    """

    def __init__(self, storage: Optional[ByteStorage], enabled: bool = True):
        self.storage = storage
        self.enabled = enabled and storage is not None

    @classmethod
    def from_config(cls, cfg: CacheConfig) -> "DiskCache":
        if not cfg.enabled:
            return cls(storage=None, enabled=False)
        return cls(LocalFileStorage(str(cfg.resolved_dir())), enabled=True)

    def _read(self, key: str) -> Optional[bytes]:
        try:
            return self.storage.load(key)  # type: ignore[union-attr]
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Cache ilegível, tratando como miss. key=%s erro=%s", key, exc)
            return None

    def _write(self, key: str, content: bytes) -> None:
        try:
            self.storage.save(key, content)  # type: ignore[union-attr]
        except OSError as exc:
            logger.warning("Falha ao gravar cache (ignorada). key=%s erro=%s", key, exc)

    def get_or_fetch(self, key: str, fetch: Callable[[], bytes]) -> bytes:
        if not self.enabled:
            return fetch()

        cached = self._read(key)
        if cached is not None:
            logger.info("Cache hit: %s (%d bytes)", key, len(cached))
            return cached

        logger.info("Cache miss: %s", key)
        content = fetch()
        self._write(key, content)
        return content
