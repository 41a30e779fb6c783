import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from .. import config
from ..exceptions import ContentProviderError
from ..models import ContentNode


@runtime_checkable
class ContentProvider(Protocol):
    """
    Read-only access to the content repository's media tree.

    Providers that page children natively may additionally implement
        get_paged_children(node, page_index, page_size) -> (page, total)
    which fetch_children prefers over get_children.
    """

    def get_root_nodes(self) -> Sequence[ContentNode]:
        ...

    def get_children(self, node: ContentNode) -> Sequence[ContentNode]:
        ...


class InMemoryContentProvider:
    """Serves ContentNodes that were built in-process."""

    def __init__(self, roots: Optional[Sequence[ContentNode]] = None):
        self.roots = list(roots or [])

    def get_root_nodes(self) -> Sequence[ContentNode]:
        return self.roots

    def get_children(self, node: ContentNode) -> Sequence[ContentNode]:
        return node.children


class JsonContentProvider(InMemoryContentProvider):
    """
    Serves a media tree dumped to JSON.

    Accepted shapes: a list of root nodes, or {"media": [...]}. Each node:
        {"id": 1061, "name": "Images", "key": "<guid>", "contentType": "Folder",
         "properties": {"umbracoFile": "/media/1/sun.jpg"}, "children": [...]}
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> List[ContentNode]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ContentProviderError(f"Cannot read media tree {self.path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ContentProviderError(f"Media tree {self.path} is not valid JSON: {e}") from e

        if isinstance(data, dict):
            data = data.get("media")
        if not isinstance(data, list):
            raise ContentProviderError(f"Media tree {self.path} must be a list of nodes or {{\"media\": [...]}}")

        roots = [parse_node(item) for item in data]
        logging.info(f"Loaded {len(roots)} root media items from {self.path}")
        return roots


def parse_node(data: Any) -> ContentNode:
    """Builds a ContentNode (and its subtree) from a decoded JSON object."""
    if not isinstance(data, dict):
        raise ContentProviderError(f"Media node must be an object, got {type(data).__name__}")

    missing = [k for k in ("id", "name", "contentType") if k not in data]
    if missing:
        raise ContentProviderError(f"Media node {data.get('name', '?')!r} is missing {', '.join(missing)}")

    properties = data.get("properties")
    properties = {} if properties is None else properties
    children = data.get("children")
    children = [] if children is None else children
    if not isinstance(properties, dict) or not isinstance(children, list):
        raise ContentProviderError(f"Media node {data['name']!r} has malformed properties or children")

    try:
        node_id = int(data["id"])
    except (TypeError, ValueError) as e:
        raise ContentProviderError(f"Media node {data['name']!r} has a non-numeric id") from e

    return ContentNode(
        id=node_id,
        name=str(data["name"]),
        key=str(data.get("key") or ""),
        content_type=str(data["contentType"]),
        children=[parse_node(child) for child in children],
        properties=properties,
    )


def fetch_children(provider: ContentProvider,
                   node: ContentNode,
                   page_size: int = config.DEFAULT_PAGE_SIZE,
                   max_children: Optional[int] = None) -> List[ContentNode]:
    """
    Returns the children of node in provider order.

    Every child is returned unless max_children is set; a node with more
    children than that is truncated with a warning naming what was dropped.
    """
    paged = getattr(provider, "get_paged_children", None)
    if paged is None:
        children = list(provider.get_children(node))
        total = len(children)
    else:
        children, total = _fetch_all_pages(paged, node, page_size, max_children)

    if max_children is not None and total > max_children:
        logging.warning(
            f"'{node.name}' (id {node.id}) has {total} children; "
            f"exporting the first {max_children}, skipping {total - max_children}"
        )
        children = children[:max_children]
    return children


def _fetch_all_pages(paged, node: ContentNode, page_size: int, max_children: Optional[int]) -> Tuple[List[ContentNode], int]:
    children: List[ContentNode] = []
    total = 0
    page_index = 0
    while True:
        page, total = paged(node, page_index, page_size)
        page = list(page)
        children.extend(page)
        page_index += 1

        if not page or len(children) >= total:
            break
        if max_children is not None and len(children) >= max_children:
            break

    return children, max(total, len(children))
