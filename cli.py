# cli.py

import argparse
import concurrent.futures
import time

import requests
from colorama import Fore, Style

import utils
from utils import log_with_time, vlog, PRINT_LOCK, trie_node_count
from dawg import DawgBuilder, DawgError, OrderingError
from word_source import load_words


RESULT_COLORS = {
    'word':   Fore.GREEN,
    'prefix': Fore.YELLOW,
    'absent': Fore.RED,
}


def classify(dawg, query, case_sensitive=True):
    """'word', 'prefix' (a path but not a word) or 'absent'."""
    if dawg.contains_word(query, case_sensitive):
        return 'word'
    if dawg.contains_prefix(query, case_sensitive):
        return 'prefix'
    return 'absent'


def answer_queries(dawg, queries, case_sensitive=True, num_threads=1):
    """Return [(query, result)] in input order, optionally on a thread pool."""
    if num_threads <= 1 or len(queries) <= 1:
        return [(q, classify(dawg, q, case_sensitive)) for q in queries]
    with concurrent.futures.ThreadPoolExecutor(max_workers=num_threads) as executor:
        results = executor.map(lambda q: classify(dawg, q, case_sensitive), queries)
        return list(zip(queries, results))


def build_graph(words):
    t0 = time.time()
    builder = DawgBuilder()
    builder.extend(words)
    dawg = builder.finish()
    vlog(f"Word graph built ({dawg.word_count} words, {dawg.node_count} nodes)", t0)
    return dawg


def print_stats(dawg, words):
    trie_nodes = trie_node_count(words)
    ratio = dawg.node_count / trie_nodes
    log_with_time(f"Words: {dawg.word_count}", color=Fore.CYAN)
    log_with_time(f"Nodes: {dawg.node_count} (trie: {trie_nodes}, ratio {ratio:.3f})", color=Fore.CYAN)


def print_result(query, result):
    with PRINT_LOCK:
        print(f"{query}: {RESULT_COLORS[result]}{result}{Style.RESET_ALL}", flush=True)


def run_cli(argv=None):
    parser = argparse.ArgumentParser(description="Word graph builder and lookup")
    parser.add_argument("queries", nargs="*", help="Words to look up")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--words", type=str, default=None, help="Path to a word list, one word per line")
    source.add_argument("--url", type=str, default=None, help="Download the word list from this URL")
    parser.add_argument("--upper", action="store_true", help="Uppercase words before building")
    parser.add_argument("--alpha-only", action="store_true", help="Skip words with non-alphabetic characters")
    parser.add_argument("--sort", action="store_true", help="Sort and dedupe words before building (input must be sorted otherwise)")
    parser.add_argument("--ignore-case", action="store_true", help="Case-insensitive lookups")
    parser.add_argument("--count", action="append", default=[], metavar="PREFIX", help="Print how many words start with PREFIX (repeatable)")
    parser.add_argument("--num-threads", type=int, default=1, help="Threads used to answer queries (default: 1)")
    parser.add_argument("--stats", action="store_true", help="Print word and node counts")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    args = parser.parse_args(argv)

    utils.start_time = time.time()
    utils.VERBOSE = args.verbose
    case_sensitive = not args.ignore_case

    try:
        words = load_words(
            path=args.words,
            url=args.url,
            upper=args.upper,
            alpha_only=args.alpha_only,
            sort=args.sort,
        )
    except FileNotFoundError:
        log_with_time(f"Could not find word list: {args.words}", color=Fore.RED)
        return 1
    except (OSError, requests.RequestException) as e:
        log_with_time(f"Error loading word list: {e}", color=Fore.RED)
        return 1

    try:
        dawg = build_graph(words)
    except OrderingError as e:
        log_with_time(f"{e} (pass --sort to sort the input)", color=Fore.RED)
        return 1
    except DawgError as e:
        log_with_time(f"Could not build word graph: {e}", color=Fore.RED)
        return 1

    if args.stats:
        print_stats(dawg, words)

    for prefix in args.count:
        n = dawg.count_words_with_prefix(prefix, case_sensitive)
        log_with_time(f"{n} words start with {prefix!r}", color=Fore.CYAN)

    for query, result in answer_queries(dawg, args.queries, case_sensitive, args.num_threads):
        print_result(query, result)
    return 0
