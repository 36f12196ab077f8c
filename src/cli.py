"""Command-line interface for groupstream."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from artifacts.context import LocalCompletionContext
from config import ConfigError, GroupStreamConfig, load_config, resolve_exec_root
from contract.errors import ArtifactResolutionError
from contract.validation import validate_event_stream
from events.paths import FileUriConverter, PathConverter, PrefixUriConverter
from events.write import write_event_stream
from manifest import Manifest, ManifestError, load_manifest
from verify.verify import verify_determinism


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Directory holding groupstream.toml (default: .)",
    )
    parser.add_argument(
        "--exec-root",
        default=None,
        help="Execution root for artifact paths (default: config exec_root)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="groupstream")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser(
        "encode", help="Encode the groups of a manifest to an event stream"
    )
    encode_parser.add_argument("manifest", help="JSON manifest of artifact sets")
    _add_common_options(encode_parser)
    encode_parser.add_argument(
        "--out",
        default=None,
        help="Event stream to write (default: config output)",
    )

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a written event stream"
    )
    validate_parser.add_argument("stream", help="Event stream (JSONL)")
    validate_parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat a missing schema_version as an error",
    )

    verify_parser = subparsers.add_parser(
        "verify", help="Verify an event stream re-encodes byte for byte"
    )
    verify_parser.add_argument("manifest", help="JSON manifest of artifact sets")
    verify_parser.add_argument("stream", help="Event stream (JSONL)")
    _add_common_options(verify_parser)

    return parser


def _completion_context(
    manifest: Manifest, config: GroupStreamConfig, exec_root: Path
) -> LocalCompletionContext:
    return LocalCompletionContext(
        exec_root,
        fileset_mappings=manifest.fileset_mappings,
        missing=manifest.missing,
        expand_trees=config.expand_trees,
        check_exists=config.check_exists,
    )


def _path_converter(config: GroupStreamConfig, exec_root: Path) -> PathConverter:
    if config.uri_prefix:
        return PrefixUriConverter(exec_root, config.uri_prefix)
    return FileUriConverter()


def _load_inputs(
    root: Path, manifest_arg: str, exec_root_arg: str | None
) -> tuple[Manifest, GroupStreamConfig, Path]:
    config = load_config(root)
    manifest = load_manifest(Path(manifest_arg).expanduser().resolve())
    exec_root = resolve_exec_root(root, exec_root_arg or config.exec_root)
    return manifest, config, exec_root


def _handle_encode(
    root: Path, manifest_arg: str, exec_root_arg: str | None, out: str | None
) -> int:
    try:
        manifest, config, exec_root = _load_inputs(root, manifest_arg, exec_root_arg)
    except (ConfigError, ManifestError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2
    out_path = (
        Path(out).expanduser().resolve() if out is not None else root / config.output
    )
    try:
        write_event_stream(
            manifest.groups,
            _completion_context(manifest, config, exec_root),
            out_path,
            path_converter=_path_converter(config, exec_root),
        )
    except ArtifactResolutionError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    return 0


def _handle_validate(stream: str, *, strict: bool) -> int:
    result = validate_event_stream(
        Path(stream).expanduser().resolve(), strict_schema_version=strict
    )
    for warning in result.warnings:
        sys.stderr.write(f"warning: {warning.location()}: {warning.message}\n")
    if result.errors:
        for error in result.errors:
            sys.stderr.write(f"{error.location()}: {error.message}\n")
        return 1
    return 0


def _handle_verify(
    root: Path, manifest_arg: str, stream: str, exec_root_arg: str | None
) -> int:
    stream_path = Path(stream).expanduser().resolve()
    try:
        manifest, config, exec_root = _load_inputs(root, manifest_arg, exec_root_arg)
        result = verify_determinism(
            roots=manifest.groups,
            completion_context=_completion_context(manifest, config, exec_root),
            stream_path=stream_path,
            path_converter=_path_converter(config, exec_root),
        )
    except (ConfigError, ManifestError, FileNotFoundError, IsADirectoryError) as exc:
        sys.stderr.write(f"stream: {stream_path}\n")
        sys.stderr.write(f"error: {exc}\n")
        return 2
    except ArtifactResolutionError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1
    if not result.ok:
        for label, set_ids in (
            ("missing", result.missing),
            ("extra", result.extra),
            ("mismatches", result.mismatches),
        ):
            for set_id in set_ids:
                sys.stderr.write(f"{label}: {set_id}\n")
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "validate":
        return _handle_validate(args.stream, strict=args.strict)

    root = Path(args.root).expanduser().resolve()

    if args.command == "encode":
        return _handle_encode(root, args.manifest, args.exec_root, args.out)

    if args.command == "verify":
        return _handle_verify(root, args.manifest, args.stream, args.exec_root)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
