import re
import time

import requests

from scoring import normalize_word
from utils import log_with_time, vlog

REQUEST_TIMEOUT = 30

_WORD_RE = re.compile(r"[a-z]+")


def is_url(source):
    return str(source).startswith(("http://", "https://"))


def read_source(source):
    """Return the text behind ``source``, a local path or an http(s) URL."""
    if is_url(source):
        resp = requests.get(source, timeout=REQUEST_TIMEOUT)
        resp.raise_for_status()
        return resp.text
    with open(source, 'r', encoding='utf-8') as f:
        return f.read()


def tokenize(text):
    """Split running text into lowercase words, dropping anything outside a-z."""
    return _WORD_RE.findall(text.lower())


def load_words(source):
    t0 = time.time()
    log_with_time(f"⟳ Loading words from {source}…")
    words = tokenize(read_source(source))
    vlog(f"Corpus tokenized ({len(words)} words)", t0)
    log_with_time(f"✅ {len(words)} corpus words")
    return words


def load_dictionary(source):
    t0 = time.time()
    log_with_time(f"⟳ Loading dictionary from {source}…")
    wordset = {
        w
        for w in (normalize_word(line) for line in read_source(source).splitlines())
        if w.isascii() and w.isalpha()
    }
    vlog(f"Dictionary loaded and filtered ({len(wordset)} words)", t0)
    log_with_time(f"✅ {len(wordset)} dictionary words")
    return wordset
