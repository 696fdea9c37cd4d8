from scoring import placement_score
import threading
import utils


from collections import OrderedDict

_seen_words = {}
_actual_hits = 0
_actual_misses = 0
CACHE_DISABLED = False

# Guards the shared cache and counters when words are scored on a thread pool
_CACHE_LOCK = threading.Lock()

# LRU cache using OrderedDict
MAX_CACHE_SIZE = 50000
class LRUCache(OrderedDict):
    def __init__(self, maxsize=MAX_CACHE_SIZE, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.maxsize = maxsize
    def __getitem__(self, key):
        value = super().__getitem__(key)
        self.move_to_end(key)
        return value
    def __setitem__(self, key, value):
        if key in self:
            self.move_to_end(key)
        super().__setitem__(key, value)
        if len(self) > self.maxsize:
            oldest = next(iter(self))
            del self[oldest]


def _default_cache():
    cache = getattr(cached_placement_score, "_cache", None)
    if cache is None:
        cache = LRUCache(MAX_CACHE_SIZE)
        cached_placement_score._cache = cache
    return cache


def cached_placement_score(word, config, histogram=None, cache=None):
    """Compute or retrieve a cached placement score.

    The corpus repeats the same words many times, so scores are memoised per
    (word, config). When CACHE_DISABLED is True, always recomputes without
    touching cache counters.
    """
    global _actual_hits, _actual_misses

    if CACHE_DISABLED:
        return placement_score(word, config, histogram)

    if cache is None:
        cache = _default_cache()

    key = (word, config)
    with _CACHE_LOCK:
        # Verbose word tracking for diagnostics
        if utils.VERBOSE:
            _seen_words[word] = _seen_words.get(word, 0) + 1
        if key in cache:
            _actual_hits += 1
            return cache[key]

    val = placement_score(word, config, histogram)
    with _CACHE_LOCK:
        _actual_misses += 1
        cache[key] = val
    return val


def clear_cache():
    global _actual_hits, _actual_misses
    with _CACHE_LOCK:
        _default_cache().clear()
        _seen_words.clear()
        _actual_hits = 0
        _actual_misses = 0


def cache_stats():
    return {"hits": _actual_hits, "misses": _actual_misses, "size": len(_default_cache())}


def add_counts(hits, misses):
    """Fold hit/miss counts reported by worker processes into this process's totals."""
    global _actual_hits, _actual_misses
    with _CACHE_LOCK:
        _actual_hits += hits
        _actual_misses += misses


def print_cache_summary():
    # Words scored in worker processes are only visible through their counts
    if _seen_words:
        utils.log_with_time(f"[CACHE SUMMARY] Unique words scored: {len(_seen_words)}")
        repeated = [w for w, c in _seen_words.items() if c > 1]
        utils.log_with_time(f"[CACHE SUMMARY] Words seen more than once: {len(repeated)}")
        if repeated:
            utils.log_with_time(f"[CACHE SUMMARY] Example repeated word: {repeated[0]}")
    stats = cache_stats()
    utils.log_with_time(f"[CACHE SUMMARY] Actual cache hits: {stats['hits']}")
    utils.log_with_time(f"[CACHE SUMMARY] Actual cache misses: {stats['misses']}")
