import concurrent.futures
import os
import time
from functools import reduce

from colorama import Fore

from config import TOP_GROUPS, default_config
from errors import ConfigurationError
from scoring import letter_histogram, is_playable, validate_word
import score_cache
import utils
from score_cache import cached_placement_score
from utils import log_with_time, vlog

STRATEGIES = ("sequential", "threads", "processes")

# Each worker gets a few chunks so one slow chunk does not hold up the pool
CHUNKS_PER_WORKER = 4


def validate_corpus(words):
    """Check every word up front so a bad word aborts the run before any scoring."""
    for w in words:
        validate_word(w)


def score_words(words, dictionary, config):
    """Filter, score and group ``words`` in a single pass.

    Returns a dict mapping score -> list of words, each list in the order
    the words appear in ``words``.
    """
    groups = {}
    for w in words:
        if w not in dictionary:
            continue
        histogram = letter_histogram(w)
        if not is_playable(histogram, config):
            continue
        score = cached_placement_score(w, config, histogram)
        groups.setdefault(score, []).append(w)
    return groups


def merge_score_groups(left, right):
    """Union of two score groupings; lists under the same score are concatenated."""
    merged = {score: list(ws) for score, ws in left.items()}
    for score, ws in right.items():
        merged.setdefault(score, []).extend(ws)
    return merged


def top_score_groups(groups, n=TOP_GROUPS):
    """The ``n`` highest scores with their words, best first."""
    return [(score, groups[score]) for score in sorted(groups, reverse=True)[:n]]


def _chunked(words, n_chunks):
    size = max(1, -(-len(words) // n_chunks))
    return [words[i:i + size] for i in range(0, len(words), size)]


# Per-process inputs installed by _init_worker, so each process receives the
# dictionary and config once instead of with every chunk
_WORKER_STATE = {}


def _init_worker(dictionary, config, cache_disabled, verbose):
    _WORKER_STATE["dictionary"] = dictionary
    _WORKER_STATE["config"] = config
    score_cache.CACHE_DISABLED = cache_disabled
    utils.VERBOSE = verbose


def _score_chunk(chunk):
    """Score one chunk in a worker process; returns (groups, cache hits, cache misses)."""
    before = score_cache.cache_stats()
    groups = score_words(chunk, _WORKER_STATE["dictionary"], _WORKER_STATE["config"])
    after = score_cache.cache_stats()
    return groups, after["hits"] - before["hits"], after["misses"] - before["misses"]


def _submit_chunks(executor, strategy, chunks, dictionary, config):
    if strategy == "threads":
        return {
            executor.submit(score_words, chunk, dictionary, config): (time.time(), i)
            for i, chunk in enumerate(chunks)
        }
    return {
        executor.submit(_score_chunk, chunk): (time.time(), i)
        for i, chunk in enumerate(chunks)
    }


def _make_executor(strategy, workers, dictionary, config, mp_context=None):
    if strategy == "threads":
        return concurrent.futures.ThreadPoolExecutor(max_workers=workers)
    return concurrent.futures.ProcessPoolExecutor(
        max_workers=workers,
        mp_context=mp_context,
        initializer=_init_worker,
        initargs=(dictionary, config, score_cache.CACHE_DISABLED, utils.VERBOSE),
    )


def parallel_score_words(words, dictionary, config, strategy="processes", workers=None, mp_context=None):
    """Score ``words`` on a worker pool and merge the partial groupings.

    Every chunk builds its own grouping; nothing is shared between workers
    except the read-only dictionary and config. Worker processes inherit the
    cache and verbosity switches of this process and report their cache
    counts back to it.
    """
    if workers is None:
        workers = os.cpu_count() or 1
    chunks = _chunked(words, workers * CHUNKS_PER_WORKER)
    if not chunks:
        return {}

    partials = [None] * len(chunks)
    with _make_executor(strategy, workers, dictionary, config, mp_context) as executor:
        future_to_info = _submit_chunks(executor, strategy, chunks, dictionary, config)
        for future in concurrent.futures.as_completed(future_to_info):
            start, idx = future_to_info[future]
            result = future.result()
            if strategy == "threads":
                partials[idx] = result
            else:
                partials[idx], hits, misses = result
                score_cache.add_counts(hits, misses)
            vlog(f"Chunk {idx+1}/{len(chunks)}: {len(chunks[idx])} words, {len(partials[idx])} scores", start)

    return reduce(merge_score_groups, partials, {})


def best_words(words, dictionary, config=None, strategy="sequential", workers=None, top=TOP_GROUPS):
    """Top ``top`` score groups for the dictionary words of ``words`` that fit the tile supply.

    Returns a list of ``(score, words)`` pairs, highest score first. Raises
    ``InvalidInputError`` before scoring anything if a word is not plain a-z.
    """
    if strategy not in STRATEGIES:
        raise ConfigurationError(f"Unknown strategy {strategy!r}; expected one of {', '.join(STRATEGIES)}")
    if workers is not None and workers < 1:
        raise ConfigurationError(f"workers must be at least 1, got {workers}")
    if top < 0:
        raise ConfigurationError(f"top must be non-negative, got {top}")
    if config is None:
        config = default_config()

    words = list(words)
    t0 = time.time()
    validate_corpus(words)
    vlog(f"Validated {len(words)} words", t0)

    t1 = time.time()
    if strategy == "sequential":
        groups = score_words(words, dictionary, config)
    else:
        groups = parallel_score_words(words, dictionary, config, strategy=strategy, workers=workers)
    vlog(f"Scored corpus with {strategy} strategy", t1)

    qualifying = sum(len(ws) for ws in groups.values())
    log_with_time(f"{qualifying} playable words across {len(groups)} distinct scores", color=Fore.CYAN)
    return top_score_groups(groups, top)
