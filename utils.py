# --- utils.py ---

import time
import threading
from colorama import Fore, Style, init

init()

REQUEST_TIMEOUT = 30

# Emit a verbose progress line every this many added words
PROGRESS_EVERY = 50_000

VERBOSE = False
start_time = None

# Lock used for synchronized printing across threads
PRINT_LOCK = threading.Lock()

def log_with_time(msg, color=Fore.LIGHTBLUE_EX):
    """Print ``msg`` with a timestamp."""
    global start_time
    if start_time is None:
        start_time = time.time()
    elapsed = time.time() - start_time
    mins = int(elapsed // 60)
    secs = elapsed % 60
    timestamp = Style.DIM + f"[{mins:02}:{secs:06.3f}]" + Style.RESET_ALL
    with PRINT_LOCK:
        print(f"{timestamp} {color}{msg}{Style.RESET_ALL}", flush=True)

def vlog(msg, t0=None):
    if VERBOSE:
        if t0 is not None:
            elapsed = time.time() - t0
            log_with_time(f"{msg} (took {elapsed:.3f}s)")
        else:
            log_with_time(msg)

def split_chars(word):
    """Split ``word`` into transition labels: one label per Unicode code point."""
    return list(word)

def fold_label(ch):
    """Key used for case-insensitive label comparison."""
    return ch.casefold()

def common_prefix_length(a, b):
    n = 0
    for x, y in zip(split_chars(a), split_chars(b)):
        if x != y:
            break
        n += 1
    return n

def trie_node_count(words):
    """Node count (root included) of the plain, unminimized trie over ``words``."""
    prefixset = set()
    for w in words:
        for i in range(1, len(w) + 1):
            prefixset.add(w[:i])
    return 1 + len(prefixset)
