#!/usr/bin/env python3
"""
Pool Statistics Collector
=========================
Thin entry-point. All logic lives in poolstats.runner.cli.

Usage:
    python3 collect_pools.py                      # pools.json -> pools/<name>/<timestamp>
    python3 collect_pools.py --delay 0 -v         # no pause between pools, debug logs
"""

from poolstats.runner.cli import main

if __name__ == "__main__":
    main()
