# nodian/core/fs_scanner.py
import os
import fnmatch
from pathlib import Path
from typing import Iterable, List, Optional, Callable
from loguru import logger

from .errors import DocumentIOError
from .models import FileNode


def _sort_key(node: FileNode):
    # Directories first, then case-insensitive name
    return (not node.is_dir, node.name.lower())


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def list_directory(dir_path: Path, ignore_patterns: Iterable[str] = ()) -> List[FileNode]:
    """
    Lists the immediate children of `dir_path`, directories before files.
    Symlinks are left out, as in the full tree scan.
    Nothing is cached: every call re-reads the directory.
    """
    dir_path = Path(dir_path)
    patterns = list(ignore_patterns)
    try:
        entries = list(os.scandir(dir_path))
    except OSError as e:
        logger.warning(f"Could not list directory {dir_path}: {e}")
        raise DocumentIOError(f"Could not read directory {dir_path}: {e.strerror or e}") from e

    nodes: List[FileNode] = []
    for entry in entries:
        if _matches_any(entry.name, patterns):
            logger.trace(f"Ignoring '{entry.name}' in listing")
            continue
        try:
            if entry.is_symlink():
                logger.trace(f"Ignoring symlink: {entry.path}")
                continue
            is_dir = entry.is_dir()
            entry_stat = entry.stat()
        except OSError as e:
            # Entries removed while listing land here
            logger.warning(f"Could not stat {entry.path}: {e}")
            continue
        nodes.append(FileNode(path=Path(entry.path), name=entry.name, is_dir=is_dir,
                              size=0 if is_dir else entry_stat.st_size, mod_time=entry_stat.st_mtime))
    nodes.sort(key=_sort_key)
    logger.debug(f"Listed {len(nodes)} entries in {dir_path}")
    return nodes


class _NotebookScannerCore:
    """Recursive scan of a notebook folder into a FileNode tree."""

    def __init__(self,
                 root_path: Path,
                 ignore_patterns: List[str],
                 error_callback: Optional[Callable[[str], None]] = None):
        self.root_path = Path(os.path.abspath(root_path)) # Same keying as the document registry
        self.ignore_patterns = ignore_patterns
        self.error_callback = error_callback
        logger.debug(f"Scanner core initialized for {self.root_path} with ignores: {self.ignore_patterns}")

    def _emit_error(self, message: str):
        if self.error_callback:
            try: self.error_callback(message)
            except Exception as e: logger.error(f"Error in error callback: {e}")

    def is_ignored(self, entry_path: Path) -> bool:
        """
        Check if a path should be ignored based on symlinks or ignore patterns.
        Patterns are matched against the name and the path relative to the root.
        """
        try:
             if entry_path.is_symlink():
                 logger.trace(f"Ignoring symlink: {entry_path}")
                 return True
        except OSError as e:
             logger.warning(f"Could not check if path is symlink {entry_path}: {e}. Assuming ignored.")
             self._emit_error(f"Permission error checking symlink: {entry_path.name}")
             return True

        try:
            relative_path_str = entry_path.relative_to(self.root_path).as_posix()
        except ValueError:
            relative_path_str = None

        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(entry_path.name, pattern):
                return True
            if relative_path_str and fnmatch.fnmatch(relative_path_str, pattern):
                return True
        return False

    def scan_directory_sync(self) -> FileNode:
        """
        Scans the root directory structure and returns the root node.
        Raises DocumentIOError if the root is not a readable directory.
        """
        logger.info(f"Scanning notebook tree: {self.root_path}")
        if not self.root_path.is_dir():
            raise DocumentIOError(f"Provided path is not a valid directory: {self.root_path}")
        root_node = self._scan_recursive(self.root_path, None)
        if root_node is None:
            raise DocumentIOError(f"Could not read directory: {self.root_path}")
        return root_node

    def _scan_recursive(self, dir_path: Path, parent: Optional[FileNode]) -> Optional[FileNode]:
        try:
            dir_stat = dir_path.stat()
        except OSError as e:
            logger.warning(f"Could not stat directory {dir_path}: {e}")
            self._emit_error(f"Access Error stating dir: {dir_path.name}")
            return None
        dir_node = FileNode(path=dir_path, name=dir_path.name, is_dir=True, mod_time=dir_stat.st_mtime, parent=parent)

        try: entries = list(os.scandir(dir_path))
        except OSError as scandir_err:
             logger.warning(f"Could not scan directory contents {dir_path}: {scandir_err}")
             self._emit_error(f"Access Error scanning: {dir_path.name}")
             return dir_node # Return dir node even if contents unreadable

        child_nodes: List[FileNode] = []
        for entry in entries:
            entry_path = Path(entry.path)
            if self.is_ignored(entry_path):
                continue
            if entry.is_dir():
                sub_dir_node = self._scan_recursive(entry_path, dir_node)
                if sub_dir_node: child_nodes.append(sub_dir_node)
            elif entry.is_file():
                try:
                    file_stat = entry.stat()
                    child_nodes.append(FileNode(path=entry_path, name=entry.name, is_dir=False, size=file_stat.st_size,
                                                mod_time=file_stat.st_mtime, parent=dir_node))
                except OSError as stat_err:
                    logger.warning(f"Could not stat file {entry_path}: {stat_err}")
                    self._emit_error(f"Access Error stating: {entry.name}")

        dir_node.children = sorted(child_nodes, key=_sort_key)
        return dir_node
