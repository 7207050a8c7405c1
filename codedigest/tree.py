import logging
import os
from typing import List, Optional

from codedigest.config import TreeConfig
from codedigest.errors import TraversalError
from codedigest.gitignore import EntryFilter, GitIgnoreManager
from codedigest.models import NodeType, TreeNode, TreeResult
from codedigest.renderer import Renderer
from codedigest.utils import join_relative, root_name

logger = logging.getLogger(__name__)


class DirectoryTree:
    """
    Builds the filtered directory hierarchy as TreeNode objects.
    Applies the same entry filter as the scanner, so the tree and the
    digest agree on which paths exist. Children keep filesystem order.
    """

    def __init__(self, config: Optional[TreeConfig] = None):
        self.config = config or TreeConfig()

    def build(
        self,
        dir_path: str,
        ignore_manager: Optional[GitIgnoreManager],
        config: Optional[TreeConfig] = None,
    ) -> TreeResult:
        """Return the tree in text and structured form."""
        root = self.generate_json_tree(dir_path, ignore_manager, config)
        return TreeResult(text=Renderer.render_tree(root), root=root)

    def generate_tree(
        self,
        dir_path: str,
        ignore_manager: Optional[GitIgnoreManager],
        config: Optional[TreeConfig] = None,
    ) -> str:
        return Renderer.render_tree(self.generate_json_tree(dir_path, ignore_manager, config))

    def generate_json_tree(
        self,
        dir_path: str,
        ignore_manager: Optional[GitIgnoreManager],
        config: Optional[TreeConfig] = None,
    ) -> TreeNode:
        config = config or self.config
        entry_filter = EntryFilter(ignore_manager, include_dot_files=config.include_dot_files)
        try:
            listing = self._list(dir_path)
        except OSError as exc:
            raise TraversalError(dir_path, str(exc)) from exc

        children = self._build_children(listing, "", 0, entry_filter, config)
        return TreeNode(
            name=root_name(dir_path),
            path=".",
            node_type=NodeType.DIRECTORY,
            children=children,
        )

    @staticmethod
    def _list(dir_path: str) -> List[os.DirEntry]:
        with os.scandir(dir_path) as it:
            return list(it)

    def _build_dir(self, entry: os.DirEntry, rel_path: str, depth: int,
                   entry_filter: EntryFilter, config: TreeConfig) -> TreeNode:
        metadata = {}
        children: List[TreeNode] = []
        try:
            listing = self._list(entry.path)
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", rel_path, exc)
            metadata["error"] = str(exc)
            if isinstance(exc, PermissionError):
                metadata["permission_denied"] = True
        else:
            children = self._build_children(listing, rel_path, depth, entry_filter, config)

        return TreeNode(
            name=entry.name,
            path=rel_path,
            node_type=NodeType.DIRECTORY,
            children=children,
            metadata=metadata,
        )

    def _build_children(self, listing: List[os.DirEntry], rel_dir: str, depth: int,
                        entry_filter: EntryFilter, config: TreeConfig) -> List[TreeNode]:
        nodes = []
        for entry in listing:
            rel_path = join_relative(rel_dir, entry.name)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            if entry_filter(rel_path, entry.name, is_dir):
                continue
            if is_dir:
                # directories deeper than max_depth are left out of both forms
                if config.max_depth is not None and depth + 1 > config.max_depth:
                    logger.debug("Skipping %s (deeper than max_depth)", rel_path)
                elif config.include_directories:
                    nodes.append(self._build_dir(entry, rel_path, depth + 1, entry_filter, config))
            elif config.include_files:
                node_type = NodeType.SYMLINK if entry.is_symlink() else NodeType.FILE
                nodes.append(TreeNode(name=entry.name, path=rel_path, node_type=node_type))
        return nodes
