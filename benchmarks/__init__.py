"""
Benchmarks Module
=================

Performance benchmarks for the persona-aware compression engine.

Available benchmarks:
- compression_comparison: Compares none, balanced and aggressive across personas

Usage:
    python -m benchmarks.compression_comparison
"""

__all__: list[str] = []
