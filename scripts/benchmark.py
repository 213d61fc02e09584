#!/usr/bin/env python3
"""
snapbind Performance Benchmarks

Times reference extraction on documents of growing size and prints a rich
table of the largest workload each scenario handles within the time limit.

Usage:
    python scripts/benchmark.py            # Run all benchmarks
    python scripts/benchmark.py --config   # Show current benchmark configuration

Configuration:
    Adjust the constants at the top of the file to change benchmark parameters.
"""

import argparse
import time
from typing import Any, Callable, Dict

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from snapbind import (
    DocumentReference,
    ExtractOptions,
    SubscriptionEntry,
    extract_refs,
)

# Configuration constants - adjust these to change benchmark behavior
TIME_LIMIT_SECONDS = 0.5  # Maximum time allowed per extraction
STARTING_N = 10  # Starting number of fields
SCALE_FACTOR = 2.0  # How much to multiply N by each iteration


def print_config():
    """Print the benchmark configuration."""
    print("Benchmark configuration:")
    print(f"  TIME_LIMIT_SECONDS = {TIME_LIMIT_SECONDS}")
    print(f"  STARTING_N = {STARTING_N}")
    print(f"  SCALE_FACTOR = {SCALE_FACTOR}")


def _flat_document(n: int) -> Dict[str, Any]:
    """n scalar fields and n/10 references."""
    doc = {f"field{i}": i for i in range(n)}
    for i in range(max(n // 10, 1)):
        doc[f"ref{i}"] = DocumentReference(f"/items/{i}")
    return doc


def _nested_document(n: int) -> Dict[str, Any]:
    """A chain of n nested containers with a reference at the bottom."""
    doc: Dict[str, Any] = {"leaf": DocumentReference("/items/leaf")}
    for i in range(n):
        doc = {"child": doc, "depth": i}
    return doc


def _list_document(n: int) -> Dict[str, Any]:
    """A list of n references, half of them already resolved."""
    return {"items": [DocumentReference(f"/items/{i}") for i in range(n)]}


def _list_subscriptions(n: int) -> Dict[str, SubscriptionEntry]:
    return {
        f"items.{i}": SubscriptionEntry(f"/items/{i}", lambda i=i: {"id": i})
        for i in range(0, n, 2)
    }


class SnapbindBenchmark:
    """Rich-formatted display for extraction benchmarks."""

    def __init__(self):
        self.console = Console()
        self.options = ExtractOptions()
        self.results = {}

    def run_benchmarks(self):
        """Run all benchmarks and display results."""
        start_time = time.time()
        self._display_header()

        self._run_scaling("Flat document", lambda n: (_flat_document(n), {}))
        # deep recursion is bounded by the interpreter's recursion limit
        self._run_scaling(
            "Nested document", lambda n: (_nested_document(n), {}), max_n=500
        )
        self._run_scaling(
            "List of references",
            lambda n: (_list_document(n), _list_subscriptions(n)),
        )

        self._display_final_results(start_time)

    def _run_scaling(
        self, name: str, build: Callable[[int], tuple], max_n: int = 10_000_000
    ):
        """Grow N until one extraction (plus its re-run) exceeds the time limit."""
        self.console.print(f"[yellow]Running {name}...[/yellow]")
        n = STARTING_N
        best = {"max_n": 0, "seconds": 0.0}

        while n <= max_n:
            doc, subs = build(n)
            start = time.perf_counter()
            data, _ = extract_refs(doc, None, subs, self.options)
            extract_refs(doc, data, subs, self.options)
            elapsed = time.perf_counter() - start
            if elapsed > TIME_LIMIT_SECONDS:
                break
            best = {"max_n": n, "seconds": elapsed}
            n = int(n * SCALE_FACTOR)

        self.results[name] = best

    def _display_header(self):
        header = Panel(
            Align.center("snapbind Extraction Benchmark Suite"),
            title="snapbind Benchmarks",
            border_style="blue",
        )
        self.console.print(header)
        self.console.print()

    def _display_final_results(self, start_time: float):
        table = Table(title="Final Benchmark Results")
        table.add_column("Benchmark", style="cyan", no_wrap=True)
        table.add_column("Max N", style="magenta", justify="right")
        table.add_column("Time (ms)", style="green", justify="right")
        table.add_column("Per node (us)", style="yellow", justify="right")

        for name, result in self.results.items():
            max_n = result["max_n"]
            seconds = result["seconds"]
            per_node = (seconds / max_n) * 1e6 / 2 if max_n else 0.0
            table.add_row(name, f"{max_n:,}", f"{seconds * 1000:.1f}", f"{per_node:.2f}")

        self.console.print()
        self.console.print(table)

        elapsed = time.time() - start_time
        self.console.print()
        self.console.print(f"[dim]Benchmark completed in {elapsed:.2f} seconds[/dim]")


def main():
    """Main entry point for the benchmark script."""
    parser = argparse.ArgumentParser(description="snapbind Performance Benchmarks")
    parser.add_argument(
        "--config", action="store_true", help="Show current benchmark configuration"
    )
    args = parser.parse_args()

    print_config()
    if args.config:
        return
    print()

    SnapbindBenchmark().run_benchmarks()


if __name__ == "__main__":
    main()
