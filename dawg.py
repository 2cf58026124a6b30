# dawg.py
# Minimal acyclic word graph. Words go in sorted; after every word the part of
# the previous word's path that can no longer grow is minimized, so common
# suffixes end up shared by every word that uses them.

import time
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import utils
from node_store import Node, NodeStore
from utils import split_chars, fold_label, common_prefix_length, vlog


class DawgError(Exception):
    """Base class for word graph errors."""


class OrderingError(DawgError, ValueError):
    """A word was added that sorts before the previously added word."""

    def __init__(self, word: str, previous_word: str):
        super().__init__(f"words must be added in sorted order: {word!r} < {previous_word!r}")
        self.word = word
        self.previous_word = previous_word


class EmptyWordError(DawgError, ValueError):
    """The empty string cannot be added to the graph."""


class BuilderFinishedError(DawgError, RuntimeError):
    """The builder was used after finish()."""


class DawgBuilder:
    """
    Incremental construction:
      - add(word) for each word in non-decreasing order
      - finish() -> Dawg, once; the builder is sealed afterwards
    Internals:
      _unchecked: [(parent, label, child)] for the path of the previous word,
                  root-ward first; entries beyond the shared prefix with the
                  next word are minimized tail-first.
    """

    __slots__ = ("_store", "_root", "_unchecked", "_previous_word", "_finished", "_added", "_t0")

    def __init__(self):
        self._store = NodeStore()
        self._root = self._store.create_node()
        self._unchecked: List[Tuple[int, str, int]] = []
        self._previous_word = ""
        self._finished = False
        self._added = 0
        self._t0 = time.time()

    # ---------- Public API ----------
    @property
    def previous_word(self) -> str:
        return self._previous_word

    @property
    def word_count(self) -> int:
        """Distinct words added so far."""
        return self._added

    @property
    def finished(self) -> bool:
        return self._finished

    def add(self, word: str):
        """
        Append ``word`` to the graph. Raises OrderingError if it sorts before the
        previous word; the builder is left unchanged in that case.
        """
        if self._finished:
            raise BuilderFinishedError("cannot add words after finish()")
        if not word:
            raise EmptyWordError("cannot add the empty word")
        if word < self._previous_word:
            raise OrderingError(word, self._previous_word)

        labels = split_chars(word)
        common = common_prefix_length(word, self._previous_word)
        self._minimize(common)

        store = self._store
        for label in labels[common:]:
            parent = self._unchecked[-1][2] if self._unchecked else self._root
            child = store.create_node()
            store.node(parent).edges[label] = child
            self._unchecked.append((parent, label, child))

        # the frontier always spans the whole word here
        store.node(self._unchecked[-1][2]).terminal = True
        if word != self._previous_word:
            self._added += 1
            if utils.VERBOSE and self._added % utils.PROGRESS_EVERY == 0:
                vlog(f"{self._added} words added, {len(store)} live nodes", self._t0)
        self._previous_word = word

    def extend(self, words: Iterable[str]):
        for w in words:
            self.add(w)

    def finish(self) -> "Dawg":
        """
        Minimize what is left of the frontier, compute per-node word counts and
        drop the build-only state. Returns the finished graph.
        """
        if self._finished:
            raise BuilderFinishedError("finish() was already called")
        t0 = time.time()
        self._minimize(0)
        self._finished = True
        registered = self._store.registry_size
        self._store.clear_registry()
        self._unchecked = []

        dawg = Dawg(self._store, self._root)
        total = dawg.recount()
        vlog(f"Graph finished: {total} words, {len(self._store)} nodes ({registered} minimized)", t0)
        return dawg

    # ---------- Helpers ----------
    def _minimize(self, down_to_depth: int):
        """Collapse frontier entries deeper than ``down_to_depth``, deepest first."""
        store = self._store
        unchecked = self._unchecked
        while len(unchecked) > down_to_depth:
            parent, label, child = unchecked[-1]
            canonical, _ = store.register_if_new(store.signature_of(child), child)
            store.node(parent).edges[label] = canonical
            unchecked.pop()


class Dawg:
    """
    Finished word graph with the query API:
      - Dawg.build(words) -> Dawg
      - contains_word(str, case_sensitive=True) -> bool
      - contains_prefix(str, case_sensitive=True) -> bool
      - match_word(str, case_sensitive=True) -> stored spelling or None
      - iter_extensions(prefix) -> Iterable[(label, is_terminal)]
      - count_words_with_prefix(prefix) -> int
    Queries only read the node store, so any number of threads may share one
    instance. recount() is the only method that writes.
    """

    __slots__ = ("_store", "_root")

    def __init__(self, store: NodeStore, root: int = 0):
        self._store = store
        self._root = root

    @classmethod
    def build(cls, words: Iterable[str], sort: bool = False) -> "Dawg":
        """
        Build a graph from ``words``. Empty strings are skipped. With
        ``sort=True`` the input is sorted first; otherwise it must already be
        in order.
        """
        if sort:
            words = sorted(words)
        builder = DawgBuilder()
        for w in words:
            if not w:
                continue
            builder.add(w)
        return builder.finish()

    @property
    def root(self) -> int:
        return self._root

    def node(self, handle: int) -> Node:
        return self._store.node(handle)

    @property
    def node_count(self) -> int:
        return len(self._store)

    @property
    def word_count(self) -> int:
        return self.reachable_count(self._root)

    def reachable_count(self, handle: Optional[int] = None) -> int:
        """Number of words accepted from ``handle`` (the root by default)."""
        if handle is None:
            handle = self._root
        n = self._store.node(handle)
        if n.count is None:
            self.recount()
        return n.count

    def contains_word(self, word: str, case_sensitive: bool = True) -> bool:
        return self._walk(word, case_sensitive, terminal=True) is not None

    def contains_prefix(self, word: str, case_sensitive: bool = True) -> bool:
        """True if ``word`` is a path from the root; the empty string always is."""
        return self._walk(word, case_sensitive) is not None

    def find(self, word: str, case_sensitive: bool = True) -> Optional[int]:
        """Handle of the node reached by ``word``, or None."""
        found = self._walk(word, case_sensitive)
        return found[0] if found else None

    def match_word(self, word: str, case_sensitive: bool = True) -> Optional[str]:
        """
        The word as spelled in the graph, or None if it is not a word. Only
        differs from ``word`` for case-insensitive lookups.
        """
        found = self._walk(word, case_sensitive, terminal=True)
        return found[1] if found else None

    def iter_extensions(self, prefix: str) -> Iterator[Tuple[str, bool]]:
        """
        Yield (next_label, is_terminal_after_appending_label) in label order.
        If prefix isn't present, yields nothing.
        """
        idx = self.find(prefix)
        if idx is None:
            return
        edges = self._store.node(idx).edges
        for label in sorted(edges):
            yield label, self._store.node(edges[label]).terminal

    def count_words_with_prefix(self, prefix: str, case_sensitive: bool = True) -> int:
        """
        Number of words starting with ``prefix``. Ignoring case, every casing
        of the prefix counts; merged casings share a node, so each node's count
        is weighted by how many spellings lead to it.
        """
        if case_sensitive:
            idx = self.find(prefix)
            return 0 if idx is None else self.reachable_count(idx)
        return sum(self.reachable_count(idx) * paths for idx, paths in self._fold_frontier(prefix).items())

    def recount(self) -> int:
        """
        Recompute every node's word count from scratch and return the root's.
        Each distinct node is counted once however many parents share it.
        """
        store = self._store
        for n in store.iter_nodes():
            n.count = None

        stack = [(self._root, False)]
        while stack:
            handle, expanded = stack.pop()
            n = store.node(handle)
            if n.count is not None:
                continue
            if expanded:
                total = 1 if n.terminal else 0
                for child in n.edges.values():
                    total += store.node(child).count
                n.count = total
            else:
                stack.append((handle, True))
                for child in n.edges.values():
                    if store.node(child).count is None:
                        stack.append((child, False))
        return store.node(self._root).count

    def __contains__(self, word):
        return isinstance(word, str) and self.contains_word(word)

    def __len__(self):
        return self.word_count

    # ---------- Helpers ----------
    def _walk(self, word: str, case_sensitive: bool, terminal: bool = False) -> Optional[Tuple[int, str]]:
        """
        Return (node handle, spelled path) after consuming word, or None if no
        such path (or, with ``terminal``, no such word).

        Ignoring case, several labels can match one character ("a" and "A").
        They are tried depth-first, exact label first and then in sorted label
        order, and the first path that succeeds wins.
        """
        store = self._store
        labels = split_chars(word)
        if case_sensitive:
            idx = self._root
            for ch in labels:
                idx = store.node(idx).edges.get(ch)
                if idx is None:
                    return None
            if terminal and not store.node(idx).terminal:
                return None
            return idx, word

        keys = [fold_label(ch) for ch in labels]
        stack = [(self._root, 0, "")]
        # a (node, depth) pair that failed once fails again
        seen = set()
        while stack:
            idx, depth, spelled = stack.pop()
            if (idx, depth) in seen:
                continue
            seen.add((idx, depth))
            if depth == len(labels):
                if not terminal or store.node(idx).terminal:
                    return idx, spelled
                continue
            edges = store.node(idx).edges
            candidates = self._fold_candidates(edges, labels[depth], keys[depth])
            for label in reversed(candidates):
                stack.append((edges[label], depth + 1, spelled + label))
        return None

    def _fold_frontier(self, word: str) -> Dict[int, int]:
        """{node handle: number of casings of ``word`` that reach it}."""
        store = self._store
        level = {self._root: 1}
        for ch in split_chars(word):
            key = fold_label(ch)
            nxt: Dict[int, int] = {}
            for idx, paths in level.items():
                edges = store.node(idx).edges
                for label in self._fold_candidates(edges, ch, key):
                    child = edges[label]
                    nxt[child] = nxt.get(child, 0) + paths
            if not nxt:
                return {}
            level = nxt
        return level

    @staticmethod
    def _fold_candidates(edges, ch, key) -> List[str]:
        found = [ch] if ch in edges else []
        for label in sorted(edges):
            if label != ch and fold_label(label) == key:
                found.append(label)
        return found
