"""Console rendering of search results."""

import sys
from typing import List, Optional, TextIO

from .search import SearchResult


def format_result(result: SearchResult) -> List[str]:
    """
    Lines describing one result.

    Search-mode results are preceded by the pool, combiner and combination
    statistics; every result ends with its numbers and its pairs.
    """
    lines = []
    if result.mode == "search":
        lines.append(f"{result.triplet_count} triplets in {result.triplet_seconds}s.")
        lines.append(f"Using {result.combiner_count} combiners.")
        lines.append(f"Tried {result.combination_count} combinations with "
                     f"{result.number_set.improvement_count} improvements.")

    numbers = " ".join(str(number) for number in result.number_set.sorted_numbers())
    lines.append(f"{result.set_size} numbers in {result.elapsed}s: {numbers}".rstrip())

    pairs = result.pairs
    rendered = " ".join(str(pair) for pair in pairs)
    lines.append(f"{len(pairs)} powers pairs: {rendered}".rstrip())
    return lines


class ResultReporter:
    """Write results to a text stream, stdout by default."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout

    def report(self, result: SearchResult) -> None:
        for line in format_result(result):
            self.stream.write(line + "\n")
        self.stream.flush()
