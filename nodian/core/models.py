# nodian/core/models.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List

@dataclass
class FileNode:
    """Represents a file or directory in the notebook tree."""
    path: Path
    name: str
    is_dir: bool
    size: int = 0 # Size in bytes, 0 for directories
    mod_time: float = 0.0 # Modification time (timestamp)
    children: List['FileNode'] = field(default_factory=list)
    parent: Optional['FileNode'] = None # Optional link back to parent

    # Allow hashing based on path for use in sets
    def __hash__(self):
        return hash(self.path)

    def __eq__(self, other):
        if not isinstance(other, FileNode):
            return NotImplemented
        return self.path == other.path

@dataclass
class DocumentSession:
    """An open notebook file: editing buffer, dirty flag and rendered preview."""
    path: Path
    text: str # Current buffer
    saved_text: str # Content as last read from / written to disk
    dirty: bool = False
    preview: str = "" # Rendered HTML of the buffer

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def label(self) -> str:
        """Tab-style label, '*' marks unsaved changes."""
        return f"*{self.name}" if self.dirty else self.name
