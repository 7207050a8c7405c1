"""
Configuration structures for the scanner, the tree builder and the digest.

Every option is declared with its default; unknown keys are rejected.
"""
import codecs
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 10 MiB
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_GITIGNORE = ".gitignore"


def _check_encoding(value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError as exc:
        raise ValueError(f"unknown encoding: {value}") from exc
    return value


class ScannerConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    include_dot_files: bool = False
    include_binary_files: bool = False
    encoding: str = "utf-8"
    # Replaces the null-byte sniff when set; receives the absolute path.
    binary_test: Optional[Callable[[str], bool]] = None

    @field_validator("encoding")
    @classmethod
    def known_encoding(cls, value: str) -> str:
        return _check_encoding(value)


class TreeConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    max_depth: Optional[int] = Field(default=None, ge=0)
    include_dot_files: bool = False
    include_files: bool = True
    include_directories: bool = True


class DigestConfig(BaseModel):
    """Options for a whole digest run.

    The scanner and tree options are derived from this model so both
    traversals always share the same dot-file policy.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    ignore_patterns: List[str] = Field(default_factory=list)
    gitignore_path: str = DEFAULT_GITIGNORE
    ignore_case: bool = True
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, ge=0)
    include_binary_files: bool = False
    include_dot_files: bool = False
    encoding: str = "utf-8"
    max_depth: Optional[int] = Field(default=None, ge=0)

    @field_validator("encoding")
    @classmethod
    def known_encoding(cls, value: str) -> str:
        return _check_encoding(value)

    def scanner_config(self) -> ScannerConfig:
        return ScannerConfig(
            max_file_size=self.max_file_size,
            include_dot_files=self.include_dot_files,
            include_binary_files=self.include_binary_files,
            encoding=self.encoding,
        )

    def tree_config(self) -> TreeConfig:
        return TreeConfig(
            max_depth=self.max_depth,
            include_dot_files=self.include_dot_files,
        )
