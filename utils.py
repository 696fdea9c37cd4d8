# --- utils.py ---

import time
import threading
import json
from colorama import Fore, Style, init
import os

init()

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

def results_to_json(results):
    return [{"score": score, "words": list(words)} for score, words in results]

def log_results_to_file(results, meta=None, logs_dir=None):
    """Log a run's top score groups to a dated JSON file in the `logs` directory.
    If the file exists, replace the stored result only if the new top score is higher."""
    if logs_dir is None:
        logs_dir = os.path.join(os.getcwd(), 'logs')
    os.makedirs(logs_dir, exist_ok=True)
    log_file = os.path.join(logs_dir, f"results_{time.strftime('%Y-%m-%d')}.json")

    log_data = {"run": meta or {}}

    # If file exists, load and compare best_result
    if os.path.exists(log_file):
        try:
            with open(log_file, 'r') as f:
                log_data = json.load(f)
        except json.JSONDecodeError:
            log_with_time(f"Ignoring unreadable log file {log_file}", color=Fore.YELLOW)

    new_top = results[0][0] if results else None
    existing = log_data.get("best_result") or []
    existing_top = existing[0]["score"] if existing else float('-inf')
    if new_top is not None and new_top > existing_top:
        log_data["run"] = meta or {}
        log_data["best_result"] = results_to_json(results)
        log_with_time(f"Updated best_result in {log_file}", color=Fore.GREEN)
    else:
        log_with_time(f"Existing best_result in {log_file} has equal or higher score; not updated.", color=Fore.YELLOW)

    with open(log_file, 'w') as f:
        json.dump(log_data, f, indent=2)
    return log_file
