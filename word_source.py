# word_source.py
# Where the words come from: a local word list or one downloaded over HTTP.

import time
import requests

import utils
from utils import log_with_time, vlog


def clean_words(lines, upper=False, alpha_only=False, sort=False):
    """
    Strip whitespace and drop blank lines. Optionally uppercase, keep only
    alphabetic words, and sort + dedupe (the builder needs sorted input).
    """
    words = []
    for line in lines:
        w = line.strip()
        if not w:
            continue
        if alpha_only and not w.isalpha():
            continue
        words.append(w.upper() if upper else w)
    if sort:
        words = sorted(set(words))
    return words


def read_words(path, **options):
    t0 = time.time()
    with open(path, 'r', encoding='utf-8') as f:
        words = clean_words(f, **options)
    vlog(f"Read {len(words)} words from {path}", t0)
    return words


def fetch_words(url, **options):
    t0 = time.time()
    log_with_time("⟳ Downloading dictionary…")
    resp = requests.get(url, timeout=utils.REQUEST_TIMEOUT)
    resp.raise_for_status()
    words = clean_words(resp.text.splitlines(), **options)
    vlog(f"Dictionary downloaded and filtered ({len(words)} words)", t0)
    log_with_time(f"✅ {len(words)} words")
    return words


def load_words(path=None, url=None, **options):
    """Read from ``path`` when given, otherwise download from ``url``."""
    if path:
        return read_words(path, **options)
    if url:
        return fetch_words(url, **options)
    raise ValueError("no word source: pass a path or a url")
