#!/usr/bin/env python
"""
Quick start example - the simplest way to run a sheared simulation.

This demonstrates the high-level API for users who just want results
without dealing with the internal details.

Usage:
    python examples/quickstart.py
"""

from shearmd import simulate


def main():
    print("=" * 60)
    print("Sheared LJ Fluid Quick Start")
    print("=" * 60)

    # 1. Simplest possible simulation
    print("\n1. Sheared LJ fluid (defaults):")
    print("-" * 40)
    result = simulate.lj_shear_flow()
    print(f"   Final strain: {result.final_strain:.4f}")

    # 2. Stronger shear, lower density
    print("\n2. Sheared LJ fluid (custom parameters):")
    print("-" * 40)
    result = simulate.lj_shear_flow(
        n_atoms=256,
        temperature=1.2,
        density=0.6,
        strain_rate=0.1,
        nblock=5,
        nstep=200,
    )

    # 3. Compare with the unsheared fluid
    print("\n3. Equilibrium reference (no shear):")
    print("-" * 40)
    result = simulate.lj_shear_flow(strain_rate=0.0)
    print(f"   Strain stays at {result.final_strain}")

    print("\n" + "=" * 60)
    print("All examples completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()
