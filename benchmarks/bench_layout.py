#!/usr/bin/env python3
"""
Benchmark script comparing 2D coordinate generation speed between RDKit
and planaria.

Usage:
    python benchmarks/bench_layout.py [--extended]

Options:
    --extended    Run extended benchmark with multiple molecules and detailed metrics
"""

import os
import sys
import time
from dataclasses import dataclass
from typing import Optional

# Ensure local planaria is used (not installed version)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Test molecules with varying complexity
TEST_MOLECULES = {
    "small_ether": "CCOCC",
    "medium_drug": "CC(C)Cc1ccc(cc1)C(C)C(=O)O",  # Ibuprofen
    "fused": "c1ccc2cc3ccccc3cc2c1",  # Anthracene
    "bridged": "C1C2CC3CC1CC(C2)C3",  # Adamantane
    "drug_like": "Cc1ccc(cc1Nc2nccc(n2)c3cccnc3)NC(=O)c4ccc(cc4)CN5CCN(CC5)C",  # Imatinib-like
}

# Default molecule for quick benchmark
DEFAULT_MOLECULE = TEST_MOLECULES["drug_like"]

ITERATIONS = 500
EXTENDED_ITERATIONS = 200


@dataclass
class BenchmarkResult:
    """Results from a single benchmark run."""
    smiles: str
    time_seconds: float
    iterations: int
    num_atoms: int
    num_bonds: int

    @property
    def time_per_call_ms(self) -> float:
        return (self.time_seconds / self.iterations) * 1000

    @property
    def time_per_atom_us(self) -> float:
        """Microseconds per atom per call."""
        return (self.time_seconds / self.iterations / self.num_atoms) * 1_000_000


def benchmark_rdkit(smiles: str, iterations: int) -> BenchmarkResult:
    """Benchmark RDKit Compute2DCoords."""
    from rdkit import Chem
    from rdkit.Chem import AllChem

    mol = Chem.MolFromSmiles(smiles)
    if mol is None:
        raise ValueError(f"RDKit failed to parse SMILES: {smiles}")

    # Warmup
    AllChem.Compute2DCoords(mol)

    start = time.perf_counter()
    for _ in range(iterations):
        AllChem.Compute2DCoords(mol)
    end = time.perf_counter()

    return BenchmarkResult(
        smiles=smiles,
        time_seconds=end - start,
        iterations=iterations,
        num_atoms=mol.GetNumAtoms(),
        num_bonds=mol.GetNumBonds(),
    )


def benchmark_planaria(smiles: str, iterations: int) -> BenchmarkResult:
    """Benchmark planaria generate_coordinates."""
    from planaria import CoordinateGenerator, parse

    mol = parse(smiles)
    generator = CoordinateGenerator()

    # Warmup
    generator.generate(mol)

    start = time.perf_counter()
    for _ in range(iterations):
        generator.generate(mol)
    end = time.perf_counter()

    return BenchmarkResult(
        smiles=smiles,
        time_seconds=end - start,
        iterations=iterations,
        num_atoms=mol.num_atoms,
        num_bonds=mol.num_bonds,
    )


def _run(label: str, bench, smiles: str, iterations: int) -> Optional[BenchmarkResult]:
    try:
        result = bench(smiles, iterations)
    except ImportError:
        print(f"  {label}: SKIPPED (not installed)")
        return None
    print(f"  {label}: {result.time_per_call_ms:.4f} ms/call | {result.num_atoms} atoms")
    return result


def run_single_benchmark():
    """Run basic single-molecule benchmark."""
    print("=" * 70)
    print("2D Layout Benchmark: RDKit vs planaria")
    print("=" * 70)
    print(f"\nTest molecule: {DEFAULT_MOLECULE}")
    print(f"Iterations: {ITERATIONS}")
    print("-" * 70)

    rdkit_result = _run("RDKit", benchmark_rdkit, DEFAULT_MOLECULE, ITERATIONS)
    planaria_result = _run("planaria", benchmark_planaria, DEFAULT_MOLECULE, ITERATIONS)

    print("\n" + "=" * 70)
    if rdkit_result and planaria_result:
        ratio = planaria_result.time_seconds / rdkit_result.time_seconds
        if ratio < 1:
            print(f"planaria is {1/ratio:.2f}x FASTER than RDKit")
        else:
            print(f"planaria is {ratio:.2f}x SLOWER than RDKit")
    else:
        print("Could not compare (one or both libraries missing)")


def run_extended_benchmark():
    """Run extended benchmark with multiple molecules and detailed metrics."""
    print("=" * 80)
    print("EXTENDED 2D Layout Benchmark: RDKit vs planaria")
    print("=" * 80)
    print(f"\nIterations per molecule: {EXTENDED_ITERATIONS}")

    results: dict[str, dict[str, Optional[BenchmarkResult]]] = {}
    for name, smiles in TEST_MOLECULES.items():
        print(f"\n[{name}] {smiles}")
        results[name] = {
            "rdkit": _run("RDKit", benchmark_rdkit, smiles, EXTENDED_ITERATIONS),
            "planaria": _run("planaria", benchmark_planaria, smiles, EXTENDED_ITERATIONS),
        }

    print("\n" + "=" * 80)
    header = f"{'Molecule':<14} {'Atoms':>6} {'RDKit ms':>10} {'planaria ms':>12} {'Ratio':>8} {'µs/atom':>10}"
    print(header)
    print("-" * 80)
    for name, pair in results.items():
        rdkit_res, planaria_res = pair["rdkit"], pair["planaria"]
        if planaria_res is None:
            print(f"{name:<14} {'N/A':>6}")
            continue
        rdkit_ms = f"{rdkit_res.time_per_call_ms:.4f}" if rdkit_res else "N/A"
        ratio = (
            f"{planaria_res.time_seconds / rdkit_res.time_seconds:.2f}x"
            if rdkit_res else "N/A"
        )
        print(f"{name:<14} "
              f"{planaria_res.num_atoms:>6} "
              f"{rdkit_ms:>10} "
              f"{planaria_res.time_per_call_ms:>12.4f} "
              f"{ratio:>8} "
              f"{planaria_res.time_per_atom_us:>10.2f}")


def main():
    if "--extended" in sys.argv or "-e" in sys.argv:
        run_extended_benchmark()
    else:
        run_single_benchmark()
        print("\n" + "-" * 70)
        print("TIP: Run with --extended for detailed multi-molecule analysis")


if __name__ == "__main__":
    main()
