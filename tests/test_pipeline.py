import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import pytest
import multiprocessing
import contextlib
import pipeline
import score_cache
import utils
from config import ScrabbleConfig, STANDARD_LETTER_SCORES, STANDARD_AVAILABLE_LETTERS, default_config
from errors import ConfigurationError, InvalidInputError
from pipeline import (
    best_words,
    merge_score_groups,
    score_words,
    top_score_groups,
)

CONFIG = default_config()

# quiz=64, bags=20, cat/act=16, dog/god=14, a=4
CORPUS = ["cat", "dog", "quiz", "act", "cat", "zzzzzzz", "the", "bags", "god", "a", "notaword"]
DICTIONARY = {"cat", "dog", "quiz", "act", "zzzzzzz", "bags", "god", "a"}


@pytest.fixture(autouse=True)
def quiet_printing(monkeypatch):
    monkeypatch.setattr(utils, "PRINT_LOCK", contextlib.nullcontext())


@pytest.fixture
def inline_executor(monkeypatch):
    created = []

    class DummyFuture:
        def __init__(self, result):
            self._result = result
        def result(self):
            return self._result

    class DummyExecutor:
        def __init__(self, max_workers=None, mp_context=None, initializer=None, initargs=()):
            self.max_workers = max_workers
            self.futures = []
            self.submitted = []
            self.initargs = initargs
            created.append(self)
            if initializer is not None:
                initializer(*initargs)
        def submit(self, fn, *args, **kwargs):
            self.submitted.append((fn, args))
            fut = DummyFuture(fn(*args, **kwargs))
            self.futures.append(fut)
            return fut
        def __enter__(self):
            return self
        def __exit__(self, exc_type, exc, tb):
            pass

    def reversed_as_completed(fs):
        # finish chunks out of submission order
        for f in reversed(list(fs)):
            yield f

    monkeypatch.setattr(pipeline, '_WORKER_STATE', {})
    monkeypatch.setattr(pipeline.concurrent.futures, 'ProcessPoolExecutor', DummyExecutor)
    monkeypatch.setattr(pipeline.concurrent.futures, 'as_completed', reversed_as_completed)
    return created


def as_pairs(results):
    return {(score, w) for score, words in results for w in words}


def test_single_word_example():
    assert best_words(["bags"], {"bags"}, CONFIG) == [(20, ["bags"])]


def test_unplayable_word_is_excluded_not_zero():
    assert best_words(["zzzzzzz"], {"zzzzzzz"}, CONFIG) == []


def test_score_words_groups_in_corpus_order():
    groups = score_words(CORPUS, DICTIONARY, CONFIG)
    assert groups == {
        16: ["cat", "act", "cat"],
        14: ["dog", "god"],
        64: ["quiz"],
        20: ["bags"],
        4: ["a"],
    }


def test_best_words_top_three():
    assert best_words(CORPUS, DICTIONARY, CONFIG) == [
        (64, ["quiz"]),
        (20, ["bags"]),
        (16, ["cat", "act", "cat"]),
    ]


def test_fewer_than_three_scores():
    assert best_words(["dog", "god", "cat"], DICTIONARY, CONFIG) == [(16, ["cat"]), (14, ["dog", "god"])]


def test_empty_inputs():
    assert best_words([], DICTIONARY, CONFIG) == []
    assert best_words(CORPUS, set(), CONFIG) == []
    assert best_words([], set(), CONFIG, strategy="threads") == []


def test_top_parameter():
    assert [s for s, _ in best_words(CORPUS, DICTIONARY, CONFIG, top=5)] == [64, 20, 16, 14, 4]
    assert best_words(CORPUS, DICTIONARY, CONFIG, top=0) == []


def test_default_config_is_standard():
    assert best_words(["bags"], {"bags"}) == [(20, ["bags"])]


def test_custom_config_changes_scores():
    config = ScrabbleConfig([1] * 26, STANDARD_AVAILABLE_LETTERS)
    # every letter worth 1: score = 2*len + 2
    assert best_words(["cat", "quiz"], {"cat", "quiz"}, config) == [(10, ["quiz"]), (8, ["cat"])]


def test_sequential_is_deterministic():
    first = best_words(CORPUS, DICTIONARY, CONFIG)
    second = best_words(CORPUS, DICTIONARY, CONFIG)
    assert repr(first) == repr(second)


def test_invalid_word_aborts_before_scoring(monkeypatch):
    calls = []
    monkeypatch.setattr(pipeline, "cached_placement_score", lambda *a, **k: calls.append(a) or 0)
    with pytest.raises(InvalidInputError) as exc:
        best_words(["cat", "dog", "Cat"], DICTIONARY, CONFIG)
    assert exc.value.word == "Cat"
    assert calls == []


def test_unknown_strategy_rejected():
    with pytest.raises(ConfigurationError):
        best_words(CORPUS, DICTIONARY, CONFIG, strategy="async")
    with pytest.raises(ConfigurationError):
        best_words(CORPUS, DICTIONARY, CONFIG, strategy="threads", workers=0)


def test_dictionary_filter_is_idempotent():
    once = [w for w in CORPUS if w in DICTIONARY]
    twice = [w for w in once if w in DICTIONARY]
    assert once == twice
    assert score_words(once, DICTIONARY, CONFIG) == score_words(CORPUS, DICTIONARY, CONFIG)


def test_merge_is_associative_and_does_not_mutate():
    a = {16: ["cat"], 14: ["dog"]}
    b = {16: ["act"]}
    c = {64: ["quiz"], 14: ["god"]}
    left = merge_score_groups(merge_score_groups(a, b), c)
    right = merge_score_groups(a, merge_score_groups(b, c))
    assert left == right == {16: ["cat", "act"], 14: ["dog", "god"], 64: ["quiz"]}
    assert a == {16: ["cat"], 14: ["dog"]}
    assert merge_score_groups({}, a) == a


def test_merge_of_chunks_matches_single_pass():
    whole = score_words(CORPUS, DICTIONARY, CONFIG)
    parts = [score_words(CORPUS[i:i + 3], DICTIONARY, CONFIG) for i in range(0, len(CORPUS), 3)]
    merged = {}
    for part in parts:
        merged = merge_score_groups(merged, part)
    assert merged == whole


def test_top_score_groups_orders_descending():
    groups = {3: ["x"], 10: ["y"], 7: ["z"], 1: ["w"]}
    assert top_score_groups(groups) == [(10, ["y"]), (7, ["z"]), (3, ["x"])]
    assert top_score_groups({}) == []


@pytest.mark.parametrize("workers", [1, 2, 3, 8])
def test_threads_match_sequential(workers):
    sequential = best_words(CORPUS, DICTIONARY, CONFIG)
    threaded = best_words(CORPUS, DICTIONARY, CONFIG, strategy="threads", workers=workers)
    assert [s for s, _ in threaded] == [s for s, _ in sequential]
    assert as_pairs(threaded) == as_pairs(sequential)
    for (_, seq_words), (_, par_words) in zip(sequential, threaded):
        assert sorted(seq_words) == sorted(par_words)


def test_processes_merge_out_of_order_completion(inline_executor):
    sequential = best_words(CORPUS, DICTIONARY, CONFIG)
    parallel = best_words(CORPUS, DICTIONARY, CONFIG, strategy="processes", workers=2)
    assert as_pairs(parallel) == as_pairs(sequential)
    # partials are merged by chunk position, not completion order
    assert parallel == sequential


def test_processes_receive_dictionary_once(inline_executor):
    best_words(CORPUS, DICTIONARY, CONFIG, strategy="processes", workers=2)
    executor, = inline_executor
    assert executor.initargs[:2] == (DICTIONARY, CONFIG)
    assert len(executor.submitted) > 1
    for fn, args in executor.submitted:
        assert fn is pipeline._score_chunk
        assert len(args) == 1
        assert DICTIONARY not in args


@pytest.fixture
def spawn_context():
    return multiprocessing.get_context("spawn")


@pytest.fixture
def fresh_cache():
    score_cache.clear_cache()
    yield
    score_cache.clear_cache()


def test_spawned_workers_honor_disabled_cache(monkeypatch, spawn_context, fresh_cache):
    monkeypatch.setattr(score_cache, "CACHE_DISABLED", True)
    groups = pipeline.parallel_score_words(["cat"] * 5, {"cat"}, CONFIG, workers=1, mp_context=spawn_context)
    assert groups == {16: ["cat"] * 5}
    stats = score_cache.cache_stats()
    assert (stats["hits"], stats["misses"]) == (0, 0)


def test_spawned_workers_report_cache_counts(monkeypatch, spawn_context, fresh_cache):
    monkeypatch.setattr(score_cache, "CACHE_DISABLED", False)
    groups = pipeline.parallel_score_words(["cat"] * 5, {"cat"}, CONFIG, workers=1, mp_context=spawn_context)
    assert groups == {16: ["cat"] * 5}
    stats = score_cache.cache_stats()
    # one worker process: the first "cat" misses, the rest hit its cache
    assert (stats["hits"], stats["misses"]) == (4, 1)
    # scoring happened in the worker, not here
    assert stats["size"] == 0


def test_processes_real_pool():
    corpus = CORPUS * 20
    sequential = best_words(corpus, DICTIONARY, CONFIG)
    parallel = best_words(corpus, DICTIONARY, CONFIG, strategy="processes", workers=2)
    assert as_pairs(parallel) == as_pairs(sequential)
    for (_, seq_words), (_, par_words) in zip(sequential, parallel):
        assert sorted(seq_words) == sorted(par_words)


def test_tables_not_mutated():
    config = ScrabbleConfig(STANDARD_LETTER_SCORES, STANDARD_AVAILABLE_LETTERS)
    best_words(CORPUS * 3, DICTIONARY, config, strategy="threads", workers=2)
    assert config.letter_scores == STANDARD_LETTER_SCORES
    assert config.available_letters == STANDARD_AVAILABLE_LETTERS
