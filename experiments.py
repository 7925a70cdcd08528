# experiments.py

"""
Decode-path benchmark: how much does rebuilding the tree from the code table cost?

Every dataset is compressed once, then decoded two ways:
  tree   with the tree that produced the codes
  table  with a tree reconstructed from the code table alone

Each run also damages a copy of the table (one code made a prefix of another)
and checks that reconstruction refuses it.

Outputs (in --outdir):
  - runs.csv                one row per dataset, size, repeat and decode path
  - medians.csv             median timings per dataset, size and decode path
  - decode_overhead.png     table/tree decode time ratio by size
  - code_length.png         bits per symbol vs entropy per dataset

How to run:
  python experiments.py
  python experiments.py --datasets fibonacci,ties --sizes 1024,16384 --repeat 5
  python experiments.py --outdir bench --no-plots
"""

from __future__ import annotations

import argparse
import csv
import itertools
import math
import random
import statistics
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Tuple

import matplotlib.pyplot as plt

import bitpack
import huffman as huff

DECODE_PATHS = ("tree", "table")


def elapsed_ms(start_ns: int) -> float:
    return (time.perf_counter_ns() - start_ns) / 1e6

def entropy_bits(ft: Mapping[int, int]) -> float:
    """Shannon entropy in bits per symbol"""
    total = sum(ft.values())
    if total == 0:
        return 0.0
    return -sum((n / total) * math.log2(n / total) for n in ft.values())


# Datasets
#
# Each one stresses a different tree shape: balanced (flat), lopsided (skewed),
# as deep as the alphabet allows (fibonacci), all-equal counts that only the
# tie-break orders (ties), and the single-leaf tree (single).

def flat(size: int, rng: random.Random) -> bytes:
    return bytes(rng.randrange(64) for _ in range(size))

def skewed(size: int, rng: random.Random) -> bytes:
    # symbol k appears with probability about 2^-(k+1)
    return bytes(min(int(-math.log2(1.0 - rng.random())), 31) for _ in range(size))

def fibonacci(size: int, rng: random.Random) -> bytes:
    counts = [1, 1]
    while sum(counts) + counts[-1] + counts[-2] <= size and len(counts) < 40:
        counts.append(counts[-1] + counts[-2])
    data = bytearray()
    for symbol, n in enumerate(counts):
        data.extend([symbol] * n)
    data.extend([len(counts) - 1] * (size - len(data))) # top up with the most frequent symbol
    rng.shuffle(data)
    return bytes(data[:size])

def ties(size: int, rng: random.Random) -> bytes:
    alphabet = 48
    data = bytearray(i % alphabet for i in range(size - size % alphabet))
    rng.shuffle(data)
    return bytes(data)

def single(size: int, rng: random.Random) -> bytes:
    return b"\x00" * size

DATASETS: Dict[str, Callable[[int, random.Random], bytes]] = {
    "flat": flat,
    "skewed": skewed,
    "fibonacci": fibonacci,
    "ties": ties,
    "single": single,
}

def make_dataset(name: str, size: int, seed: int) -> bytes:
    try:
        generator = DATASETS[name]
    except KeyError:
        raise ValueError(f"unknown dataset {name!r} (known: {', '.join(DATASETS)})") from None
    return generator(size, random.Random(seed))


def damage_table(code_map: Mapping[int, str]) -> Optional[Dict[int, str]]:
    """Copy of code_map where the longest code is cut down to a proper prefix of itself.

    None for a one-symbol table, which has no second code to collide with.
    """
    if len(code_map) < 2:
        return None
    victim = max(code_map, key=lambda s: (len(code_map[s]), s))
    damaged = dict(code_map)
    damaged[victim] = code_map[victim][:-1]
    return damaged


def rejects(code_map: Mapping[int, str]) -> bool:
    try:
        huff.reconstruct_huffman_tree(code_map)
    except huff.ConflictingCode:
        return True
    return False


# Runs

@dataclass
class Run:
    dataset: str
    size: int
    repeat: int
    decode_path: str
    unique_symbols: int
    max_code_length: int
    build_ms: float
    reconstruct_ms: float
    decode_ms: float
    bits_per_symbol: float
    entropy: float
    decoded_ok: bool
    conflict_detected: bool


def measure(dataset: str, size: int, repeat: int, data: bytes) -> List[Run]:
    """Compress data once, decode it along both paths, return one Run per path"""
    ft = huff.count_frequencies(data)

    start = time.perf_counter_ns()
    root = huff.build_huffman_tree(ft)
    code_map = huff.generate_huffman_codes(root)
    build_ms = elapsed_ms(start)

    packed, pad_bits = bitpack.pack_bits(huff.huffman_encode(data, code_map))
    bits = bitpack.unpack_bits(packed, pad_bits)

    damaged = damage_table(code_map)
    conflict_detected = damaged is None or rejects(damaged)

    runs = []
    for path in DECODE_PATHS:
        reconstruct_ms = 0.0
        decode_root = root
        if path == "table":
            start = time.perf_counter_ns()
            decode_root = huff.reconstruct_huffman_tree(dict(code_map))
            reconstruct_ms = elapsed_ms(start)

        start = time.perf_counter_ns()
        decoded = huff.huffman_decode_bytes(bits, code_map, decode_root)
        decode_ms = elapsed_ms(start)

        runs.append(Run(
            dataset=dataset,
            size=size,
            repeat=repeat,
            decode_path=path,
            unique_symbols=len(ft),
            max_code_length=max(len(c) for c in code_map.values()),
            build_ms=build_ms,
            reconstruct_ms=reconstruct_ms,
            decode_ms=decode_ms,
            bits_per_symbol=len(bits) / len(data),
            entropy=entropy_bits(ft),
            decoded_ok=decoded == data,
            conflict_detected=conflict_detected,
        ))
    return runs


def benchmark(datasets: List[str], sizes: List[int], repeat: int, seed: int) -> List[Run]:
    runs: List[Run] = []
    for dataset, size in itertools.product(datasets, sizes):
        for r in range(repeat):
            data = make_dataset(dataset, size, seed + r)
            if not data:
                continue # ties rounds size down to whole alphabet copies
            runs.extend(measure(dataset, size, r, data))
    return runs


# Reports

def write_runs(path: Path, runs: List[Run]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=[fld.name for fld in fields(Run)])
        w.writeheader()
        w.writerows(asdict(r) for r in runs)


def medians(runs: List[Run]) -> List[Dict[str, object]]:
    """Median reconstruct/decode time per (dataset, size, decode_path)"""
    key = lambda r: (r.dataset, r.size, r.decode_path)
    out = []
    for (dataset, size, path), group in itertools.groupby(sorted(runs, key=key), key=key):
        group = list(group)
        out.append({
            "dataset": dataset,
            "size": size,
            "decode_path": path,
            "repeats": len(group),
            "reconstruct_ms": statistics.median(r.reconstruct_ms for r in group),
            "decode_ms": statistics.median(r.decode_ms for r in group),
            "all_ok": all(r.decoded_ok and r.conflict_detected for r in group),
        })
    return out


def write_medians(path: Path, rows: List[Dict[str, object]]) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=list(rows[0]) if rows else ["dataset"])
        w.writeheader()
        w.writerows(rows)


def overhead_by_size(rows: List[Dict[str, object]]) -> Dict[str, List[Tuple[int, float]]]:
    """dataset -> [(size, (reconstruct + decode via table) / decode via tree)]"""
    cost = {(r["dataset"], r["size"], r["decode_path"]): r["reconstruct_ms"] + r["decode_ms"] for r in rows}
    out: Dict[str, List[Tuple[int, float]]] = {}
    for (dataset, size, path), table_ms in sorted(cost.items()):
        if path != "table":
            continue
        tree_ms = cost.get((dataset, size, "tree"), 0.0)
        out.setdefault(dataset, []).append((size, table_ms / tree_ms if tree_ms else float("nan")))
    return out


def plot_overhead(rows: List[Dict[str, object]], outdir: Path) -> None:
    fig, ax = plt.subplots()
    for dataset, points in overhead_by_size(rows).items():
        ax.plot([s for s, _ in points], [o for _, o in points], marker="o", label=dataset)
    ax.axhline(1.0, color="grey", linewidth=0.8)
    ax.set_xscale("log", base=2)
    ax.set_xlabel("Message size (bytes)")
    ax.set_ylabel("table decode time / tree decode time")
    ax.set_title("Cost of rebuilding the tree from the code table")
    ax.legend()
    fig.tight_layout()
    fig.savefig(outdir / "decode_overhead.png", dpi=150)
    plt.close(fig)


def plot_code_length(runs: List[Run], outdir: Path) -> None:
    tree_runs = [r for r in runs if r.decode_path == "tree"]
    names = sorted({r.dataset for r in tree_runs})
    x = range(len(names))
    mean_of = lambda name, attr: statistics.mean(getattr(r, attr) for r in tree_runs if r.dataset == name)

    fig, ax = plt.subplots()
    ax.bar([i - 0.2 for i in x], [mean_of(n, "bits_per_symbol") for n in names], width=0.4, label="huffman")
    ax.bar([i + 0.2 for i in x], [mean_of(n, "entropy") for n in names], width=0.4, label="entropy")
    ax.set_xticks(list(x))
    ax.set_xticklabels(names)
    ax.set_ylabel("bits per symbol")
    ax.set_title("Code length vs entropy")
    ax.legend()
    fig.tight_layout()
    fig.savefig(outdir / "code_length.png", dpi=150)
    plt.close(fig)


def print_report(rows: List[Dict[str, object]]) -> None:
    overhead = {(d, s): o for d, points in overhead_by_size(rows).items() for s, o in points}
    tree_ms = {(r["dataset"], r["size"]): r["decode_ms"] for r in rows if r["decode_path"] == "tree"}
    ok: Dict[Tuple[str, int], bool] = {}
    for r in rows:
        key = (r["dataset"], r["size"])
        ok[key] = ok.get(key, True) and r["all_ok"]

    print(f"{'dataset':<10} {'size':>8} {'tree ms':>9} {'overhead':>9}  check")
    for (dataset, size), ms in sorted(tree_ms.items()):
        status = "ok" if ok[(dataset, size)] else "FAILED"
        print(f"{dataset:<10} {size:>8} {ms:>9.2f} {overhead[(dataset, size)]:>8.2f}x  {status}")


# Entry point

def int_list(text: str) -> List[int]:
    try:
        return [int(x) for x in text.split(",") if x.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected comma-separated integers, got {text!r}") from None

def name_list(text: str) -> List[str]:
    names = [x.strip() for x in text.split(",") if x.strip()]
    unknown = [n for n in names if n not in DATASETS]
    if unknown:
        raise argparse.ArgumentTypeError(f"unknown dataset(s): {', '.join(unknown)}")
    return names

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Compare decoding with the built tree against decoding from the code table")
    ap.add_argument("--datasets", type=name_list, default=list(DATASETS),
                    help=f"comma-separated subset of: {', '.join(DATASETS)}")
    ap.add_argument("--sizes", type=int_list, default=[1024, 16384, 262144],
                    help="comma-separated message sizes in bytes")
    ap.add_argument("--repeat", type=int, default=3, help="runs per dataset and size; medians are reported")
    ap.add_argument("--seed", type=int, default=2024)
    ap.add_argument("--outdir", type=Path, default=Path("bench"))
    ap.add_argument("--no-plots", action="store_true", help="skip the PNG charts")
    return ap

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    args.outdir.mkdir(parents=True, exist_ok=True)

    runs = benchmark(args.datasets, args.sizes, max(1, args.repeat), args.seed)
    rows = medians(runs)
    write_runs(args.outdir / "runs.csv", runs)
    write_medians(args.outdir / "medians.csv", rows)
    if not args.no_plots and runs:
        plot_overhead(rows, args.outdir)
        plot_code_length(runs, args.outdir)

    print_report(rows)
    return 0 if all(r["all_ok"] for r in rows) else 1


if __name__ == "__main__":
    raise SystemExit(main())
