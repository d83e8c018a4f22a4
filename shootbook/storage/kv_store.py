from __future__ import annotations

import glob
import logging
import os
import shutil
import tempfile
import threading
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union
from urllib.parse import quote, unquote

from shootbook.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Interface minimale get/set/remove sur des chaînes (valeurs JSON encodées)."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> List[str]: ...


class MemoryStore:
    """Stockage en mémoire (tests, sessions éphémères)."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = str(value)

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore:
    """
    Un fichier `<clé>.json` par clé dans `data_dir`.
    - Rotation de backups (backup_enabled, backup_keep)
    - N'écrit pas si le contenu ne change pas (réduction du bruit et des .bak)
    - Fichier illisible -> copié en .corrupt.json et traité comme absent
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        *,
        backup_enabled: bool = True,
        backup_keep: int = 5,
    ) -> None:
        self.data_dir = Path(data_dir)
        self._lock = threading.Lock()
        self.backup_enabled = backup_enabled
        self.backup_keep = max(0, int(backup_keep))
        self.data_dir.mkdir(parents=True, exist_ok=True)

    # ---------------- Chemins ---------------- #

    def _path(self, key: str) -> Path:
        # '.' est encodé : le seul point du nom reste celui de l'extension
        return self.data_dir / (quote(key, safe="-_").replace(".", "%2E") + ".json")

    # ---------------- I/O bas niveau ---------------- #

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Lecture impossible de %s (%s), fichier mis de côté", path.name, e)
            try:
                shutil.copy2(path, path.with_suffix(".corrupt.json"))
            except OSError:
                pass
            return None

    def _rotate_backups(self, path: Path) -> None:
        if not self.backup_enabled or self.backup_keep <= 0:
            return
        pattern = str(path.with_suffix(".*.bak.json"))
        files = sorted(glob.glob(pattern))
        # garde les plus récents
        if len(files) > self.backup_keep:
            for old in files[: len(files) - self.backup_keep]:
                try:
                    Path(old).unlink(missing_ok=True)
                except OSError:
                    logger.warning("Backup non supprimé: %s", old)

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        with self._lock:
            # si contenu identique → ne rien faire
            if path.exists():
                try:
                    if path.read_text(encoding="utf-8") == value:
                        return
                except (OSError, UnicodeDecodeError):
                    pass

            # backup
            if self.backup_enabled and path.exists():
                ts = datetime.now().strftime("%Y%m%d-%H%M%S")
                try:
                    shutil.copy2(path, path.with_suffix(f".{ts}.bak.json"))
                except OSError as e:
                    logger.warning("Backup impossible pour %s: %s", path.name, e)
                self._rotate_backups(path)

            # write (fichier temporaire puis remplacement)
            try:
                fd, tmp = tempfile.mkstemp(dir=str(self.data_dir), suffix=".tmp")
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp, path)
            except OSError as e:
                raise StorageError(f"Cannot write '{key}': {e}") from e

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot remove '{key}': {e}") from e

    def keys(self) -> List[str]:
        out: List[str] = []
        for p in sorted(self.data_dir.glob("*.json")):
            # ignore *.bak.json / *.corrupt.json
            if p.name.count(".") != 1:
                continue
            out.append(unquote(p.stem))
        return out
