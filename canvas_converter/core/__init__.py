"""Core graph resolution and intermediate representation modules.

WHY: The core package contains the stable heart of the converter —
the IR dataclasses, the topological sorter, and the resolver that merges
paired nodes into blocks. These are consumed by all formatters and the
CLI/HTTP surfaces.

HOW: ir.py defines the data structures, toposort.py orders node ids,
resolver.py builds the graph maps and emits blocks, media.py and
markup.py derive block content, loader.py reads canvas documents.

RULES:
- IR dataclasses are the contract — change with care
- No I/O in resolver.py, toposort.py, or media.py
- loader.py is the only core module that touches the file system
"""
