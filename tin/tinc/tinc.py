# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
tinc: command-line driver for the Tin front end.

Reads one source file, parses it to HIR and pretty-prints the tree. With
`-M`, `use` statements are resolved against the modules found under the
given roots. Diagnostics go to stderr as `file:line:col: severity: message`,
or to stdout as one JSON document with `--json`.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from pprint import pformat
from typing import List, Optional, Tuple

from tin.tinhir import Diagnostic, NoFile, ParseFailed, Program, Span, parse

SOURCE_SUFFIX = ".tin"


def module_universe(roots: List[Path]) -> List[str]:
	"""
	Module paths under `roots`, in root order then path order.

	`root/a/b.tin` contributes `a/b`.
	"""
	universe: List[str] = []
	for root in roots:
		for file in sorted(root.rglob(f"*{SOURCE_SUFFIX}")):
			universe.append(file.relative_to(root).with_suffix("").as_posix())
	return universe


def resolve_uses(program: Program, universe: List[str]) -> tuple[List[Tuple[str, List[str]]], List[Diagnostic]]:
	"""Resolve every `use` in source order; one entry per statement, repeats included."""
	resolved: List[Tuple[str, List[str]]] = []
	diagnostics: List[Diagnostic] = []
	for use in program.uses:
		paths = use.glob.resolve(universe)
		if use.glob.is_glob and not paths:
			diagnostics.append(
				Diagnostic(
					message=f"`use {use.glob.pattern}` matches no module",
					code="E-USE-UNRESOLVED",
					phase="resolve",
					span=Span.from_slice(use.glob.src),
				)
			)
		resolved.append((use.glob.pattern, [path.text for path in paths]))
	return resolved, diagnostics


def _diag_to_json(diag: Diagnostic, source: Optional[Path]) -> dict:
	"""Render a Diagnostic to a structured JSON-friendly dict."""
	payload = diag.to_json()
	if payload["file"] is None and source is not None:
		payload["file"] = str(source)
	return payload


def _report(diagnostics: List[Diagnostic], *, source: Optional[Path], as_json: bool, trace: Optional[str] = None) -> int:
	exit_code = 1 if any(d.severity == "error" for d in diagnostics) else 0
	if as_json:
		print(json.dumps({"exit_code": exit_code, "diagnostics": [_diag_to_json(d, source) for d in diagnostics]}))
		return exit_code
	for diag in diagnostics:
		print(diag.render(), file=sys.stderr)
		for note in diag.notes:
			print(f"  note: {note}", file=sys.stderr)
	if trace:
		print(trace, file=sys.stderr)
	return exit_code


def main(argv: list[str] | None = None) -> int:
	"""
	Parse one Tin file and print its HIR.

	Exit code 0 on success, 1 on any error diagnostic.
	"""
	parser = argparse.ArgumentParser(prog="tinc", description="Tin front end: parse a source file to HIR")
	parser.add_argument("source", type=Path, nargs="?", help="Path to a Tin source file")
	parser.add_argument(
		"-M",
		"--module-path",
		dest="module_paths",
		action="append",
		type=Path,
		help="Module root directory (repeatable); `use` globs are resolved against the .tin files under these roots",
	)
	parser.add_argument("--check", action="store_true", help="Parse only; do not print the tree")
	parser.add_argument("--no-trace", dest="trace", action="store_false", help="Omit the source trace from parse errors")
	parser.add_argument(
		"--json",
		action="store_true",
		help="Emit diagnostics as JSON (phase/message/severity/file/line/column)",
	)
	args = parser.parse_args(argv)

	source: Optional[Path] = args.source
	try:
		if source is None:
			raise NoFile()
		text = source.read_text(encoding="utf-8")
	except NoFile as err:
		diag = Diagnostic(message=str(err), code="E-NO-FILE", phase="driver")
		return _report([diag], source=None, as_json=args.json)
	except (OSError, UnicodeDecodeError) as err:
		diag = Diagnostic(
			message=f"cannot read {source}: {err}",
			code="E-READ",
			phase="driver",
			span=Span(file=str(source)),
		)
		return _report([diag], source=source, as_json=args.json)

	try:
		program = parse(text, name=str(source), trace=args.trace)
	except ParseFailed as err:
		return _report([err.to_diagnostic()], source=source, as_json=args.json, trace=err.trace)

	resolved: List[Tuple[str, List[str]]] = []
	diagnostics: List[Diagnostic] = []
	if args.module_paths:
		resolved, diagnostics = resolve_uses(program, module_universe(args.module_paths))
		if any(d.severity == "error" for d in diagnostics):
			return _report(diagnostics, source=source, as_json=args.json)

	if args.json:
		payload: dict = {"exit_code": 0, "diagnostics": []}
		if args.module_paths:
			payload["modules"] = [{"use": pattern, "paths": paths} for pattern, paths in resolved]
		print(json.dumps(payload))
		return 0

	if not args.check:
		print(pformat(program))
	for pattern, paths in resolved:
		print(f"use {pattern}: {', '.join(paths)}")
	return 0


if __name__ == "__main__":
	sys.exit(main())
