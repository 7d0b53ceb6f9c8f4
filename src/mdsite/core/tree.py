"""Fold a flat document list into the navigation tree"""

from typing import Iterable, Union

from mdsite.core.models import DocRecord, FileNode, FolderNode
from mdsite.core.utils.collate import collation_key


TreeNode = Union[FolderNode, FileNode]


def _sort_key(node: TreeNode) -> tuple:
    return (node.type != 'folder', collation_key(node.name), node.key)


def sort_tree(nodes: list[TreeNode]) -> list[TreeNode]:
    """Sort every sibling list in place: folders first, then collated name."""
    nodes.sort(key=_sort_key)
    for node in nodes:
        if isinstance(node, FolderNode):
            sort_tree(node.children)
    return nodes


def build_docs_tree(docs: Iterable[DocRecord]) -> list[TreeNode]:
    """Build the folder/file tree; folders merge by accumulated path.

    Output depends only on the set of documents, not on their input order.
    """
    root: list[TreeNode] = []
    folders: dict[str, FolderNode] = {}

    for doc in docs:
        *folder_segments, file_name = doc.rel_path.split('/')
        level = root
        accumulated = ''
        for segment in folder_segments:
            accumulated = f"{accumulated}/{segment}" if accumulated else segment
            folder = folders.get(accumulated)
            if folder is None:
                folder = FolderNode(name=segment, key=accumulated)
                folders[accumulated] = folder
                level.append(folder)
            level = folder.children

        level.append(FileNode(
            name=file_name or doc.title,
            key=doc.rel_path,
            rel_path=doc.rel_path,
            slug=list(doc.slug),
            title=doc.title,
        ))

    return sort_tree(root)
