# nodian/core/documents.py
import os
import shutil
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from loguru import logger

from .errors import DocumentIOError, SessionNotOpenError
from .fileio import atomic_write_text
from .markdown_preview import render_markdown
from .models import DocumentSession

PathLike = Union[str, Path]


def _is_within(path: Path, root: Path) -> bool:
    return path == root or root in path.parents


def _same_entry(a: Path, b: Path) -> bool:
    # Compares the directory entries themselves (case-only renames), never link targets
    try:
        return os.path.samestat(os.lstat(a), os.lstat(b))
    except OSError as e:
        raise DocumentIOError(f"Could not compare {a.name} with {b.name}: {e}") from e


class DocumentRegistry:
    """
    Open-document registry: maps an absolute file path to its editing session.

    A path has at most one session. Every operation either completes or leaves
    the registry as it was before the call.
    """

    def __init__(self, renderer: Optional[Callable[[str], str]] = None):
        self._render = renderer or render_markdown
        self._sessions: Dict[Path, DocumentSession] = {} # Insertion order is tab order
        self.active: Optional[Path] = None # Foreground document

    @staticmethod
    def key_for(path: PathLike) -> Path:
        # abspath, not resolve(): a symlink is keyed (and deleted) as itself
        return Path(os.path.abspath(Path(path).expanduser()))

    def _require(self, path: PathLike) -> DocumentSession:
        key = self.key_for(path)
        session = self._sessions.get(key)
        if session is None:
            raise SessionNotOpenError(key)
        return session

    # --- Queries ---

    def get(self, path: PathLike) -> Optional[DocumentSession]:
        return self._sessions.get(self.key_for(path))

    def is_open(self, path: PathLike) -> bool:
        return self.key_for(path) in self._sessions

    def paths(self) -> List[Path]:
        return list(self._sessions)

    def __contains__(self, path) -> bool:
        return self.is_open(path)

    def __len__(self) -> int:
        return len(self._sessions)

    # --- Commands ---

    def open(self, path: PathLike) -> DocumentSession:
        """Opens `path`, or brings its existing session to the foreground."""
        key = self.key_for(path)
        existing = self._sessions.get(key)
        if existing is not None:
            logger.debug(f"Document already open, activating: {key}")
            self.active = key
            return existing

        try:
            with open(key, 'r', encoding='utf-8', newline='') as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to open document {key}: {e}")
            raise DocumentIOError(f"Could not open {key.name}: {e}") from e

        session = DocumentSession(path=key, text=text, saved_text=text, dirty=False, preview=self._render(text))
        self._sessions[key] = session
        self.active = key
        logger.info(f"Opened document: {key}")
        return session

    def edit(self, path: PathLike, text: str) -> DocumentSession:
        """Replaces the buffer of an open document and refreshes its preview."""
        session = self._require(path)
        session.text = text
        session.dirty = True
        session.preview = self._render(text)
        logger.trace(f"Edited {session.path} ({len(text)} chars)")
        return session

    def save(self, path: PathLike) -> DocumentSession:
        """Writes the buffer to disk. On failure the session stays dirty."""
        session = self._require(path)
        try:
            atomic_write_text(session.path, session.text)
        except OSError as e:
            logger.error(f"Failed to save document {session.path}: {e}")
            raise DocumentIOError(f"Could not save {session.name}: {e}") from e
        session.saved_text = session.text
        session.dirty = False
        logger.info(f"Saved document: {session.path}")
        return session

    def close(self, path: PathLike) -> Optional[DocumentSession]:
        """Drops the session without any unsaved-changes check."""
        key = self.key_for(path)
        session = self._sessions.pop(key, None)
        if session is None:
            return None
        if self.active == key:
            self.active = next(reversed(self._sessions), None)
        logger.info(f"Closed document: {key}{' (unsaved changes discarded)' if session.dirty else ''}")
        return session

    def rename(self, old_path: PathLike, new_name: str) -> Path:
        """
        Renames a file or folder in place and re-keys every session at or
        beneath it, keeping buffers and dirty flags. Returns the new path.
        """
        if not new_name or new_name in (".", "..") or "/" in new_name or (os.altsep and os.altsep in new_name) or os.sep in new_name:
            raise DocumentIOError(f"Invalid name: {new_name!r}")

        old_key = self.key_for(old_path)
        if not os.path.lexists(old_key):
            raise DocumentIOError(f"No such file or folder: {old_key}")
        target = old_key.parent / new_name
        if target == old_key:
            return old_key
        if os.path.lexists(target) and not _same_entry(old_key, target):
            raise DocumentIOError(f"'{new_name}' already exists in {old_key.parent}")

        try:
            os.rename(old_key, target)
        except OSError as e:
            logger.error(f"Failed to rename {old_key} to {target}: {e}")
            raise DocumentIOError(f"Could not rename {old_key.name}: {e}") from e

        rekeyed: Dict[Path, DocumentSession] = {}
        for key, session in self._sessions.items():
            if _is_within(key, old_key):
                new_key = target / key.relative_to(old_key)
                session.path = new_key
                logger.debug(f"Re-keyed open document {key} -> {new_key}")
                if self.active == key:
                    self.active = new_key
                key = new_key
            rekeyed[key] = session
        self._sessions = rekeyed
        logger.info(f"Renamed {old_key} -> {target}")
        return target

    def delete(self, path: PathLike) -> None:
        """
        Closes sessions at or beneath `path`, then removes it from disk
        (recursively for folders). If removal fails the sessions are restored.
        """
        key = self.key_for(path)
        if not os.path.lexists(key):
            raise DocumentIOError(f"No such file or folder: {key}")

        snapshot = dict(self._sessions)
        active_before = self.active
        for open_path in [k for k in self._sessions if _is_within(k, key)]:
            self.close(open_path)

        try:
            if key.is_dir() and not key.is_symlink():
                shutil.rmtree(key)
            else:
                key.unlink()
        except OSError as e:
            logger.error(f"Failed to delete {key}: {e}")
            self._sessions = snapshot
            self.active = active_before
            raise DocumentIOError(f"Could not delete {key.name}: {e}") from e
        logger.info(f"Deleted {key}")
