"""
where we store the
pydantic Data Structure classes
for the digest, the tree and the run statistics

"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class NodeType(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class TreeNode(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: str
    path: str
    node_type: NodeType
    children: Optional[List['TreeNode']] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ScanEntry(BaseModel):
    path: str
    content: str


class FileError(BaseModel):
    path: str
    error: str


class ScanStats(BaseModel):
    files_processed: int = 0
    files_skipped: int = 0
    total_size: int = 0
    errors: List[FileError] = Field(default_factory=list)

    def record_error(self, path: str, error: str) -> None:
        self.errors.append(FileError(path=path, error=error))
        self.files_skipped += 1


class DigestStats(ScanStats):
    ignored_patterns: List[str] = Field(default_factory=list)


class ScanResult(BaseModel):
    files: List[ScanEntry] = Field(default_factory=list)
    stats: Union[DigestStats, ScanStats]


class TreeResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    root: TreeNode = Field(alias="json")


class FilesSection(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    entries: List[ScanEntry] = Field(alias="json")


class RepositoryInfo(BaseModel):
    repository: str = "local"
    branch: str = "local"
    commit: str = "local"


class DigestMetadata(BaseModel):
    timestamp: str
    directory: str
    execution_time: str
    stats: DigestStats
    repository: RepositoryInfo = Field(default_factory=RepositoryInfo)


class DigestResult(BaseModel):
    metadata: DigestMetadata
    files: FilesSection
    tree: TreeResult
