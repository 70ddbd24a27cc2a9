# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tin command-line driver (`tinc`).

The CLI entrypoint is `tin.tinc.tinc:main`.
"""

__all__ = []
