# nodian/config/schema.py
from pydantic import BaseModel, Field
from typing import List

from ..core.codecs import Encoding, DEFAULT_ENCODING
from ..core.hashing import HashAlgorithm, DEFAULT_ALGORITHM
from ..core.json_format import DEFAULT_INDENT
from ..core.markdown_preview import DEFAULT_EXTENSIONS
from ..core.notebook import DEFAULT_FOLDER
from ..core.timestamps import TimeUnit, DEFAULT_UNIT

class AppConfig(BaseModel):
    # Notebook lives in <notebook_base_dir>/<notebook_folder>
    notebook_base_dir: str = "."
    notebook_folder: str = DEFAULT_FOLDER
    ignore_patterns: List[str] = Field(default_factory=lambda: [
        ".git", ".DS_Store", "Thumbs.db",
        ".*_tmp*", # Leftovers of interrupted saves
    ])
    confirm_delete: bool = True
    markdown_extensions: List[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    # Initial selections of the tools
    default_hash_algorithm: HashAlgorithm = DEFAULT_ALGORITHM
    default_encoding: Encoding = DEFAULT_ENCODING
    default_time_unit: TimeUnit = DEFAULT_UNIT
    json_indent: int = Field(default=DEFAULT_INDENT, ge=0, le=8)
    year_span: int = Field(default=50, ge=1) # Picker offers current year +/- span
