# node_store.py
# Arena of automaton nodes. Parents refer to children by integer handle,
# so merging a subgraph is just rewriting one edge to point at another handle.

from typing import Dict, Iterator, List, Optional, Tuple


class Node:
    """
    One state of the automaton.
      id:       handle into the owning NodeStore (also used for display)
      terminal: True if some word ends here
      edges:    {label: child_handle}
      count:    words reachable from here, None until the graph is finished
    """

    __slots__ = ("id", "terminal", "edges", "count")

    def __init__(self, node_id: int):
        self.id = node_id
        self.terminal = False
        self.edges: Dict[str, int] = {}
        self.count: Optional[int] = None

    def __repr__(self):
        return f"Node(id={self.id}, terminal={self.terminal}, edges={len(self.edges)}, count={self.count})"


class NodeStore:
    """
    Owns every node and hands out stable handles.

    The registry maps signature -> canonical handle and only lives while the
    graph is being built; `clear_registry()` drops it once construction ends.
    """

    __slots__ = ("_nodes", "_registry", "_live")

    def __init__(self):
        self._nodes: List[Optional[Node]] = []
        self._registry: Dict[str, int] = {}
        self._live = 0

    # ---------- Public API ----------
    def create_node(self) -> int:
        """Allocate a fresh non-terminal node with no edges and return its handle."""
        handle = len(self._nodes)
        self._nodes.append(Node(handle))
        self._live += 1
        return handle

    def node(self, handle: int) -> Node:
        n = self._nodes[handle]
        if n is None:
            raise KeyError(f"node {handle} was released")
        return n

    def signature_of(self, handle: int) -> str:
        """
        Canonical descriptor: terminal flag followed by label_childid pairs in
        sorted label order, e.g. "1_a_4_s_9". Labels are single code points and
        ids are digits, so the string parses back unambiguously.
        """
        n = self.node(handle)
        parts = ["1" if n.terminal else "0"]
        for label in sorted(n.edges):
            parts.append(label)
            parts.append(str(n.edges[label]))
        return "_".join(parts)

    def register_if_new(self, signature: str, handle: int) -> Tuple[int, bool]:
        """
        Return (canonical_handle, was_new). When an equivalent node is already
        registered the candidate is released and the existing handle returned;
        callers must repoint their edge at whatever comes back.
        """
        existing = self._registry.get(signature)
        if existing is not None:
            if existing != handle:
                self.release(handle)
            return existing, False
        self._registry[signature] = handle
        return handle, True

    def release(self, handle: int):
        if self._nodes[handle] is not None:
            self._nodes[handle] = None
            self._live -= 1

    def clear_registry(self):
        self._registry = {}

    @property
    def registry_size(self) -> int:
        return len(self._registry)

    def iter_nodes(self) -> Iterator[Node]:
        """Live nodes in creation order."""
        for n in self._nodes:
            if n is not None:
                yield n

    def __len__(self):
        return self._live

    def __contains__(self, handle):
        return isinstance(handle, int) and 0 <= handle < len(self._nodes) and self._nodes[handle] is not None
