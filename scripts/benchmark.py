"""Micro-benchmarks for the worker name parser on synthetic logins."""

from __future__ import annotations

import random
import string
import time

from workername.parser import parse_workername


def synthetic_workernames(count: int = 10_000, seed: int = 1234) -> list[str]:
    rng = random.Random(seed)
    alphabet = string.ascii_lowercase + string.digits

    def token(size: int) -> str:
        return "".join(rng.choice(alphabet) for _ in range(size))

    names = []
    for _ in range(count):
        shape = rng.randrange(3)
        if shape == 0:
            names.append("bc1" + token(39))
        elif shape == 1:
            names.append(f"bc1{token(39)}.{token(6)}.{token(4)}")
        else:
            names.append(f"bc1{token(39)}.{token(8)}@{token(10)}.com.{token(6)}")
    return names


def benchmark_parse(count: int = 10_000, runs: int = 3) -> dict[str, float]:
    names = synthetic_workernames(count=count)
    best = None
    for _ in range(runs):
        start = time.perf_counter()
        for name in names:
            parse_workername(name)
        elapsed = time.perf_counter() - start
        best = elapsed if best is None or elapsed < best else best
    per_second = count / best if best else 0.0
    return {"names": count, "best_seconds": best or 0.0, "names_per_second": per_second}


if __name__ == "__main__":
    result = benchmark_parse()
    print(result)
