# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Tin language tooling.

`tin.tinhir` holds the HIR and its parser; `tin.tinc` is the command-line
driver (`tin.tinc.tinc:main`).
"""

__all__ = []
