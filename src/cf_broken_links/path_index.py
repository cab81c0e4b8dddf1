"""
Trie index over known content paths.

Paths are split on ``/`` and each segment becomes a node. A node that holds
a ContentPath marks a stored path; nodes without one are intermediate
folders. Children keep insertion order, so child and prefix listings come
back in the order content was discovered.
"""

from typing import Iterator, Optional, Union

from .config import AuditContext
from .locale import Locale
from .models import ContentPath, ContentStatus


class PathNode:
    """One path segment in the index."""

    __slots__ = ("children", "content_path")

    def __init__(self) -> None:
        self.children: dict[str, "PathNode"] = {}
        self.content_path: Optional[ContentPath] = None

    @property
    def is_end(self) -> bool:
        return self.content_path is not None


class PathIndex:
    """
    Index of the content paths known for one audit run.

    Built once per run, filled from AEM Author listings (or a content
    listing export) and queried by the rules while they look for
    replacement paths.
    """

    def __init__(self, context: Optional[AuditContext] = None):
        self.context = context
        self.root = PathNode()
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.contains(path)

    def insert(
        self,
        path: str,
        status: Union[ContentStatus, str, None] = None,
        locale: Union[Locale, str, None] = None,
    ) -> None:
        """Store a path with its status and locale code."""
        self.insert_content_path(ContentPath(path, status, locale))

    def insert_content_path(self, content_path: ContentPath) -> None:
        """
        Store a ContentPath.

        Invalid paths are ignored. Storing a path that is already present
        replaces its ContentPath.
        """
        if content_path is None or not content_path.is_valid:
            return

        node = self.root
        for segment in content_path.path.split("/"):
            child = node.children.get(segment)
            if child is None:
                child = PathNode()
                node.children[segment] = child
            node = child

        if not node.is_end:
            self._size += 1
        node.content_path = content_path

    def contains(self, path: Optional[str]) -> bool:
        return self.find(path) is not None

    def find(self, path: Optional[str]) -> Optional[ContentPath]:
        """Return the ContentPath stored at exactly ``path``, if any."""
        node = self._find_node(path)
        return node.content_path if node is not None else None

    def delete(self, path: Optional[str]) -> bool:
        """
        Remove a stored path.

        Folders that only exist as a prefix of other paths cannot be deleted.
        Ancestors left without children or content are pruned.

        Returns:
            True if the path was stored and has been removed.
        """
        if not path:
            return False

        trail: list[tuple[PathNode, str]] = []
        node = self.root
        for segment in path.split("/"):
            child = node.children.get(segment)
            if child is None:
                return False
            trail.append((node, segment))
            node = child

        if not node.is_end:
            return False

        node.content_path = None
        self._size -= 1

        # Prune upwards while the node is empty
        for parent, segment in reversed(trail):
            child = parent.children[segment]
            if child.children or child.is_end:
                break
            del parent.children[segment]

        return True

    def find_children(self, parent_path: Optional[str]) -> list[ContentPath]:
        """Return the stored paths exactly one segment below ``parent_path``."""
        node = self._find_node(parent_path)
        if node is None:
            return []
        return [child.content_path for child in node.children.values() if child.content_path]

    def find_paths_with_prefix(self, prefix: Optional[str]) -> list[ContentPath]:
        """
        Return every stored path that starts with ``prefix``.

        The prefix is matched as a plain string, so it may end in the middle
        of a segment. An empty prefix returns all stored paths.
        """
        if not prefix:
            return self.get_paths()

        *folders, partial = prefix.split("/")

        node: Optional[PathNode] = self.root
        for segment in folders:
            node = node.children.get(segment)
            if node is None:
                return []

        results: list[ContentPath] = []
        for segment, child in node.children.items():
            if segment.startswith(partial):
                results.extend(self._collect(child))
        return results

    def get_paths(self) -> list[ContentPath]:
        """Return all stored paths in depth-first insertion order."""
        return list(self._collect(self.root))

    def _find_node(self, path: Optional[str]) -> Optional[PathNode]:
        if not path:
            return None

        node = self.root
        for segment in path.split("/"):
            node = node.children.get(segment)
            if node is None:
                return None
        return node

    def _collect(self, start: PathNode) -> Iterator[ContentPath]:
        stack = [start]
        while stack:
            node = stack.pop()
            if node.content_path is not None:
                yield node.content_path
            # Reversed so that children pop in insertion order
            stack.extend(reversed(list(node.children.values())))
