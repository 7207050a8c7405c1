from typing import List

from codedigest.models import NodeType, ScanEntry, TreeNode


class Renderer:
    """
    Renderer produces the plain-text forms of a run:
      - render_tree(): the directory/file hierarchy with box-drawing connectors
      - render_files(): every file's contents under a `=== path ===` header
    """

    @classmethod
    def render_tree(cls, root: TreeNode) -> str:
        """Return the text tree, root line first, one newline-terminated line per node."""
        lines = [f"└── {cls._display_name(root)}"]
        if root.children:
            lines.extend(cls._format_children(root.children, prefix="    "))
        return "".join(f"{line}\n" for line in lines)

    @classmethod
    def _format_children(cls, nodes: List[TreeNode], prefix: str) -> List[str]:
        """Recursively format child nodes with box-drawing connectors."""
        formatted = []
        count = len(nodes)
        for index, node in enumerate(nodes):
            is_last = (index == count - 1)
            connector = "└── " if is_last else "├── "
            formatted.append(f"{prefix}{connector}{cls._display_name(node)}")

            if node.children:
                next_prefix = prefix + ("    " if is_last else "│   ")
                formatted.extend(cls._format_children(node.children, next_prefix))
        return formatted

    @staticmethod
    def _display_name(node: TreeNode) -> str:
        if node.node_type == NodeType.DIRECTORY:
            name = f"{node.name}/"
        elif node.node_type == NodeType.SYMLINK:
            name = f"{node.name} -> symlink"
        else:
            name = node.name
        if node.metadata.get("permission_denied"):
            name += " [Permission Denied]"
        return name

    @staticmethod
    def render_files(entries: List[ScanEntry]) -> str:
        """Return all file contents, each block prefixed by its relative path."""
        blocks = []
        for entry in entries:
            blocks.append(f"=== {entry.path} ===")
            blocks.append(f"{entry.content}\n")
        return "\n".join(blocks)
