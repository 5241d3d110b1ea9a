from __future__ import annotations

from typing import Protocol
import os
import tempfile


class ByteStorage(Protocol):
    def load(self, relative_path: str) -> bytes:
        """Levanta FileNotFoundError se não existir."""
        ...

    def save(self, relative_path: str, content: bytes) -> str: ...


class LocalFileStorage:
    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _full_path(self, relative_path: str) -> str:
        return os.path.join(self.base_dir, relative_path)

    def load(self, relative_path: str) -> bytes:
        with open(self._full_path(relative_path), "rb") as f:
            return f.read()

    def save(self, relative_path: str, content: bytes) -> str:
        """
        Grava num temporário do mesmo diretório e troca com os.replace.

        O arquivo final ou não existe ou está completo; escrita que falha no meio
        não deixa resto para trás.
        """
        full_path = self._full_path(relative_path)
        directory = os.path.dirname(full_path) or "."
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".part")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_path, full_path)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except FileNotFoundError:
                pass
            raise
        return full_path
