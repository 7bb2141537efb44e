"""
Folder Tree - General Resources hierarchy

PURPOSE:
General resources carry a flat, slash-delimited ``folder_path`` string
(e.g. "Communication Skills/Presentation"). There is no folders table -
the hierarchy only exists implicitly in those strings. This module derives
a navigable tree from them.

HOW IT WORKS:
1. Resources without a usable path go into the root bucket
2. Every other path is split on "/" and each prefix is registered as a folder
3. The resource is a direct member of its exact path
4. Every prefix (including the exact path) gets its cumulative count bumped

One linear pass, no recursion: the ancestor set of each resource is already
enumerated while splitting, so cumulative counts fall out for free.

The tree is a pure projection of the resource rows. Rebuild it on every fetch.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

# Sentinel identity of the depth-0 node holding unpathed resources
ROOT_FOLDER = "root"
PATH_SEPARATOR = "/"


@dataclass(frozen=True)
class FolderNode:
    """A derived folder. Identified by its full path; holds no parent/child pointers."""
    path: str
    name: str
    depth: int
    direct_count: int
    cumulative_count: int
    child_count: int


def path_depth(path: Optional[str]) -> int:
    """Number of segments in a path. The empty path (root) has depth 0."""
    if not path:
        return 0
    return len(path.split(PATH_SEPARATOR))


def split_folder_path(folder_path, collapse_empty_segments: bool = False) -> List[str]:
    """
    Split a resource's folder_path into segments.

    Non-string and empty values mean "no folder" and return [].
    Empty segments ("A//B", "/A", "A/") are kept verbatim unless
    ``collapse_empty_segments`` is set, in which case they are dropped.
    """
    if not isinstance(folder_path, str) or not folder_path:
        return []

    segments = folder_path.split(PATH_SEPARATOR)
    if collapse_empty_segments:
        segments = [segment for segment in segments if segment]
    return segments


class FolderTree:
    """
    Navigable view over general (company-less) resources.

    Usage:
        tree = FolderTree(resources)
        tree.list_children("")              # top-level folders
        tree.list_children("Aptitude")      # folders one level below
        tree.list_direct_resources("")      # unpathed resources
    """

    def __init__(self, resources: Iterable[dict], collapse_empty_segments: bool = False):
        self.collapse_empty_segments = collapse_empty_segments

        self._root_resources: List[dict] = []
        self._direct: Dict[str, List[dict]] = defaultdict(list)
        self._cumulative: Dict[str, int] = defaultdict(int)
        self._depth: Dict[str, int] = {}

        skipped = 0
        for resource in resources:
            if resource.get("company_id") is not None:
                skipped += 1
                continue
            self._add(resource)

        if skipped:
            logger.debug("Skipped %d company resources while building folder tree", skipped)

        # Sorted once; every listing filters this sequence and keeps its order
        self._folders: List[str] = sorted(self._depth)

    def _add(self, resource: dict) -> None:
        segments = split_folder_path(
            resource.get("folder_path"),
            collapse_empty_segments=self.collapse_empty_segments
        )

        if not segments:
            self._root_resources.append(resource)
            return

        for i in range(1, len(segments) + 1):
            ancestor = PATH_SEPARATOR.join(segments[:i])
            self._depth[ancestor] = i
            self._cumulative[ancestor] += 1

        self._direct[PATH_SEPARATOR.join(segments)].append(resource)

    # ------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------

    @property
    def folder_paths(self) -> List[str]:
        """All registered folder paths, lexicographically ordered."""
        return list(self._folders)

    @property
    def total_resources(self) -> int:
        return len(self._root_resources) + sum(len(items) for items in self._direct.values())

    def is_root(self, path: str) -> bool:
        """True for "" and for the "root" alias (while no real folder is named "root")."""
        return not path or (path == ROOT_FOLDER and path not in self._depth)

    def has_folder(self, path: str) -> bool:
        """True for the root (see is_root) and for every registered folder path."""
        return self.is_root(path) or path in self._depth

    def get_direct_count(self, path: str) -> int:
        if self.is_root(path):
            return len(self._root_resources)
        return len(self._direct.get(path, ()))

    def get_cumulative_count(self, path: str) -> int:
        """
        Resources in this folder and all nested folders.

        Unpathed resources do not nest, so the root's cumulative count
        equals its direct count.
        """
        if self.is_root(path):
            return len(self._root_resources)
        return self._cumulative.get(path, 0)

    def get_node(self, path: str) -> Optional[FolderNode]:
        """Return the node for a path, the root sentinel for "" (or its alias), or None."""
        if self.is_root(path):
            return FolderNode(
                path=ROOT_FOLDER,
                name=ROOT_FOLDER,
                depth=0,
                direct_count=len(self._root_resources),
                cumulative_count=len(self._root_resources),
                child_count=len(self._child_paths("")),
            )
        if path not in self._depth:
            return None
        return self._build_node(path)

    def _build_node(self, path: str) -> FolderNode:
        return FolderNode(
            path=path,
            name=path.split(PATH_SEPARATOR)[-1],
            depth=self._depth[path],
            direct_count=len(self._direct.get(path, ())),
            cumulative_count=self._cumulative[path],
            child_count=len(self._child_paths(path)),
        )

    # ------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------

    def _child_paths(self, current_path: str) -> List[str]:
        if self.is_root(current_path):
            current_path = ""
        target_depth = path_depth(current_path) + 1
        prefix = current_path + PATH_SEPARATOR if current_path else ""
        return [
            folder for folder in self._folders
            if self._depth[folder] == target_depth and folder.startswith(prefix)
        ]

    def list_children(self, current_path: str = "") -> List[FolderNode]:
        """
        Folders exactly one level below ``current_path``, ordered by full path.

        An empty ``current_path`` lists the top-level (depth 1) folders.
        """
        return [self._build_node(folder) for folder in self._child_paths(current_path)]

    def list_direct_resources(self, current_path: str = "") -> List[dict]:
        """Resources whose folder_path is exactly ``current_path`` (root for "")."""
        if self.is_root(current_path):
            return list(self._root_resources)
        return list(self._direct.get(current_path, ()))

    def breadcrumbs(self, current_path: str) -> List[Dict[str, str]]:
        """Ancestors of ``current_path`` from depth 1 down to the path itself."""
        if self.is_root(current_path):
            return []
        segments = current_path.split(PATH_SEPARATOR)
        return [
            {"path": PATH_SEPARATOR.join(segments[:i]), "name": segments[i - 1]}
            for i in range(1, len(segments) + 1)
        ]


def parent_path(path: str) -> Optional[str]:
    """Path one level up. "" for top-level folders, None for the root itself."""
    if not path:
        return None
    return path.rsplit(PATH_SEPARATOR, 1)[0] if PATH_SEPARATOR in path else ""
