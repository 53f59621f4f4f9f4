# nodian/core/notebook.py
import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from loguru import logger

from .documents import DocumentRegistry, PathLike
from .errors import DocumentIOError
from .fs_scanner import _NotebookScannerCore, list_directory
from .models import DocumentSession, FileNode

DEFAULT_FOLDER = "nodian"
NOTE_SUFFIX = ".md"


class Notebook:
    """
    A folder of Markdown notes (`<base_dir>/nodian` by default) together with
    the registry of documents currently open from it.
    """

    def __init__(self, base_dir: PathLike = ".", folder_name: str = DEFAULT_FOLDER,
                 ignore_patterns: Iterable[str] = (), registry: Optional[DocumentRegistry] = None):
        self.root = Path(os.path.abspath(Path(base_dir).expanduser() / folder_name))
        self.ignore_patterns = list(ignore_patterns)
        self.documents = registry if registry is not None else DocumentRegistry()

    def ensure_root(self) -> Path:
        """Creates the notebook folder if it does not exist yet."""
        if not self.root.is_dir():
            try:
                self.root.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise DocumentIOError(f"Could not create notebook folder {self.root}: {e}") from e
            logger.info(f"Created notebook folder: {self.root}")
        return self.root

    def resolve(self, relative: Union[str, Path] = "") -> Path:
        """Maps a notebook-relative (or absolute) path to an absolute path inside the root."""
        candidate = Path(relative)
        if not candidate.is_absolute():
            candidate = self.root / candidate
        candidate = Path(os.path.abspath(candidate))
        if candidate != self.root and self.root not in candidate.parents:
            raise DocumentIOError(f"Path is outside the notebook: {relative}")
        return candidate

    def relative(self, path: Path) -> str:
        return Path(path).relative_to(self.root).as_posix()

    def _parent_dir(self, parent: Union[str, Path]) -> Path:
        # A file as parent means "next to that file"
        parent_path = self.resolve(parent)
        if not parent_path.is_dir():
            parent_path = parent_path.parent
        return parent_path

    # --- Tree ---

    def list(self, relative: Union[str, Path] = "") -> List[FileNode]:
        return list_directory(self.resolve(relative), self.ignore_patterns)

    def tree(self, error_callback=None) -> FileNode:
        scanner = _NotebookScannerCore(self.ensure_root(), self.ignore_patterns, error_callback=error_callback)
        return scanner.scan_directory_sync()

    # --- Create ---

    def create_file(self, name: str, parent: Union[str, Path] = "") -> DocumentSession:
        """Creates an empty note (adding '.md' when missing) and opens it."""
        self._check_name(name)
        if not name.endswith(NOTE_SUFFIX):
            name += NOTE_SUFFIX
        new_path = self._parent_dir(parent) / name
        try:
            with open(new_path, 'x', encoding='utf-8'):
                pass
        except OSError as e:
            logger.error(f"Failed to create note {new_path}: {e}")
            raise DocumentIOError(f"Could not create {name}: {e}") from e
        logger.info(f"Created note: {new_path}")
        return self.documents.open(new_path)

    def create_folder(self, name: str, parent: Union[str, Path] = "") -> Path:
        self._check_name(name)
        new_path = self._parent_dir(parent) / name
        try:
            new_path.mkdir()
        except OSError as e:
            logger.error(f"Failed to create folder {new_path}: {e}")
            raise DocumentIOError(f"Could not create folder {name}: {e}") from e
        logger.info(f"Created folder: {new_path}")
        return new_path

    @staticmethod
    def _check_name(name: str):
        if not name or name in (".", "..") or "/" in name or os.sep in name or (os.altsep and os.altsep in name):
            raise DocumentIOError(f"Invalid name: {name!r}")

    # --- Document commands (notebook-relative paths) ---

    def open(self, relative: Union[str, Path]) -> DocumentSession:
        return self.documents.open(self.resolve(relative))

    def edit(self, relative: Union[str, Path], text: str) -> DocumentSession:
        return self.documents.edit(self.resolve(relative), text)

    def save(self, relative: Union[str, Path]) -> DocumentSession:
        return self.documents.save(self.resolve(relative))

    def close(self, relative: Union[str, Path]) -> Optional[DocumentSession]:
        return self.documents.close(self.resolve(relative))

    def rename(self, relative: Union[str, Path], new_name: str) -> Path:
        path = self.resolve(relative)
        if path == self.root:
            raise DocumentIOError("The notebook folder itself cannot be renamed")
        return self.documents.rename(path, new_name)

    def delete(self, relative: Union[str, Path]) -> None:
        path = self.resolve(relative)
        if path == self.root:
            raise DocumentIOError("The notebook folder itself cannot be deleted")
        self.documents.delete(path)
