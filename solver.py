import argparse
import time
import requests
import utils
from utils import log_with_time
from colorama import Fore
import score_cache
from config import TOP_GROUPS, default_config, load_config
from corpus import load_words, load_dictionary
from errors import ScrabbleError
from pipeline import STRATEGIES, best_words
import concurrent.futures


def build_parser():
    parser = argparse.ArgumentParser(description="Top-scoring playable words of a corpus")
    parser.add_argument("--words", required=True, help="Corpus text file or URL; tokenized into lowercase words")
    parser.add_argument("--dictionary", required=True, help="Dictionary file or URL, one word per line")
    parser.add_argument("--config", default=None, help="JSON file with letterScores and/or availableLetters (26 integers each)")
    parser.add_argument("--strategy", choices=STRATEGIES, default="sequential", help="How to drive the pipeline (default: sequential)")
    parser.add_argument("--workers", type=int, default=None, help="Worker count for threads/processes (default: CPU count)")
    parser.add_argument("--top", type=int, default=TOP_GROUPS, help=f"Number of score groups to report (default: {TOP_GROUPS})")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--no-cache", action="store_true", help="Disable placement score caching")
    parser.add_argument("--log-results", action="store_true", help="Save the best result of the day to a JSON log file")
    return parser


def print_results(results):
    if not results:
        log_with_time("No playable words found.", color=Fore.YELLOW)
        return
    log_with_time(f"Top {len(results)} score group(s):", color=Fore.GREEN)
    for rank, (score, words) in enumerate(results, 1):
        log_with_time(f"  #{rank} {score} points: {', '.join(words)}", color=Fore.GREEN)


def run_solver(argv=None):
    args = build_parser().parse_args(argv)

    utils.start_time = time.time()
    utils.VERBOSE = args.verbose
    score_cache.CACHE_DISABLED = args.no_cache
    score_cache.clear_cache()

    try:
        config = load_config(args.config) if args.config else default_config()

        # Fetch the corpus and dictionary in parallel
        with concurrent.futures.ThreadPoolExecutor() as executor:
            future_words = executor.submit(load_words, args.words)
            future_dict = executor.submit(load_dictionary, args.dictionary)
            words = future_words.result()
            wordset = future_dict.result()

        results = best_words(
            words,
            wordset,
            config,
            strategy=args.strategy,
            workers=args.workers,
            top=args.top,
        )
    except ScrabbleError as e:
        log_with_time(f"Error: {e}", color=Fore.RED)
        return 1
    except (OSError, requests.RequestException) as e:
        log_with_time(f"Could not load input: {e}", color=Fore.RED)
        return 1

    print_results(results)

    if args.log_results:
        utils.log_results_to_file(
            results,
            meta={
                "words": args.words,
                "dictionary": args.dictionary,
                "strategy": args.strategy,
                "config": config.to_options(),
            },
        )

    if utils.VERBOSE and not score_cache.CACHE_DISABLED:
        score_cache.print_cache_summary()

    total_elapsed = time.time() - utils.start_time
    log_with_time(f"Done in {total_elapsed:.3f}s", color=Fore.CYAN)
    return 0


def main():
    return run_solver()
