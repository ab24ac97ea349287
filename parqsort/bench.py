from random import randint as rd
import logging
import random
import time
from concurrent.futures import ProcessPoolExecutor
from functools import partial

import matplotlib.pyplot as plt

from parqsort.quicksort import parallel_sort, sort

log = logging.getLogger(__name__)

SIZES = list(range(1, 200_000, 20_000))
REPS = 3


def default_sort(arr):
    arr.sort()


SORTERS = {
    "quicksort (random pivot)": partial(sort, pivot="random"),
    "quicksort (midpoint pivot)": partial(sort, pivot="midpoint"),
    "parallel quicksort": parallel_sort,
    ".sort()": default_sort,
}


def measure(sort_fn, base_arr, reps=REPS):
    best = float('inf')
    if len(base_arr) <= 1:
        return 0.0
    expected = sorted(base_arr)
    for _ in range(reps):
        arr = base_arr.copy()
        start = time.perf_counter()
        sort_fn(arr)
        end = time.perf_counter()
        if arr != expected:
            raise AssertionError(f"{sort_fn!r} produced an unsorted result for n={len(base_arr)}")
        best = min(best, end - start)
    return best

def bench_one_n(args):
    n, base_arr = args
    return n, [measure(fn, base_arr) for fn in SORTERS.values()]

def run_bench(tasks):
    """
    tasks - list of (n, base_arr)
    returns one list of times per entry of SORTERS, in the order of tasks
    """
    times = [[] for _ in SORTERS]

    with ProcessPoolExecutor() as executor:
        for n, row in executor.map(bench_one_n, tasks):
            log.info("n=%d: %s", n, ", ".join(f"{t:.4f}s" for t in row))
            for column, t in zip(times, row):
                column.append(t)

    return times

def random_data(n, max_value=10_000_000):
    return [rd(1, max_value) for _ in range(n)]

def trend_with_jumps(n, jump_prob=0.05):
    arr = []
    value = 1
    for _ in range(n):
        if random.random() < jump_prob:
            value += rd(-10, 10)
        else:
            value += rd(0, 1)

        if value < 1:
            value = 1

        arr.append(value)

    return arr

def worst_case(n):
    return list(range(n, 0, -1))

def best_case(n):
    return list(range(n))

def worst_case_alternating_high_low(n):
    high = list(range(n, 0, -1))
    low = list(range(1, n + 1))
    arr = []
    for h, l in zip(high, low):
        arr.append(h)
        arr.append(l)
    return arr[:n]

def generate_many_duplicates(n, distinct_values=3, max_value=20):
    base_values = random.sample(range(1, max_value + 1), k=distinct_values)
    return [random.choice(base_values) for _ in range(n)]


def generate_many_unique_spread(n, range_multiplier=1000):
    """
    range_multiplier - "range" of values will be n * range_multiplier
    """
    max_value = n * range_multiplier
    arr = random.sample(range(1, max_value + 1), n)
    return arr


GENERATORS = {
    "Random data": random_data,
    "Data with jumps": trend_with_jumps,
    "Best-case data": best_case,
    "Worst-case data": worst_case,
    "Alternating-case data": worst_case_alternating_high_low,
    "Many duplicates data": generate_many_duplicates,
    "Many unique spread data": generate_many_unique_spread,
}


def plot_results(sizes, series, title):
    """
    sizes - list of array sizes
    series - list of tuples (label, values), where values is a list of times corresponding to sizes
    title  - title of the plot
    """
    plt.figure(figsize=(10, 6))
    for label, values in series:
        plt.plot(sizes, values, label=label)

    plt.title(title)
    plt.xlabel("Array size")
    plt.ylabel("Time, sec")
    plt.grid(True)
    plt.legend()
    plt.tight_layout()
    plt.show()



if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s - %(message)s')

    demo = [5, 3, 1, 2, 5, 6, 7, 8, 12, 4, 2, 3, 5, 1, 3, 5, 0]
    sort(demo)
    print(" ".join(str(x) for x in demo))

    for name, generate in GENERATORS.items():
        log.info("Starting benchmark for %s...", name)
        tasks = [(n, generate(n)) for n in SIZES]
        times = run_bench(tasks)
        plot_results(
            SIZES,
            list(zip(SORTERS, times)),
            f"{name} sorting comparison",
        )
