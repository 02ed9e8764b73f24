#!/usr/bin/env python3
"""
Main entry point for the Fleet Storage Benchmark.

Runs the benchmark from a source checkout without installing the package.
"""

import sys
import os

# Add the src directory to the Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from fleet_benchmark.cli import main

if __name__ == "__main__":
    sys.exit(main())
