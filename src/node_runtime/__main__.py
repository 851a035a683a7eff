"""Command line entry point for node-runtime."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, Tuple

from .bootstrap import NpmPackageStatus, check_and_install_npm_packages
from .config import RuntimeConfig, load_config
from .errors import NodeRuntimeError
from .runtime import RealNodeRuntime


def parse_package_spec(spec: str) -> Tuple[str, str]:
    """Split "name@version", keeping the scope of "@scope/name@version"."""
    name, sep, version = spec.rpartition("@")
    if not sep or not name or not version:
        raise argparse.ArgumentTypeError(f"expected name@version, got {spec!r}")
    return name, version


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="node-runtime",
        description="Provision a pinned Node.js runtime and run npm through it",
    )
    parser.add_argument(
        "--project",
        type=Path,
        default=None,
        help="Directory containing .node-runtime.toml (default: cwd)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("path", help="Print the node binary path")

    latest = subparsers.add_parser("latest", help="Print the latest version of a package")
    latest.add_argument("package")

    install = subparsers.add_parser("install", help="Install exact package versions")
    install.add_argument("directory", type=Path)
    install.add_argument(
        "packages", nargs="+", type=parse_package_spec, metavar="NAME@VERSION"
    )

    bootstrap = subparsers.add_parser(
        "bootstrap", help="Install or upgrade configured npm tools"
    )
    bootstrap.add_argument(
        "names", nargs="*", help="Tools to check (default: [bootstrap].packages)"
    )

    return parser


async def run_command(args: argparse.Namespace, config: RuntimeConfig) -> int:
    runtime = RealNodeRuntime.from_config(config)

    if args.command == "path":
        print(await runtime.binary_path())
    elif args.command == "latest":
        print(await runtime.npm_package_latest_version(args.package))
    elif args.command == "install":
        await runtime.npm_install_packages(args.directory.resolve(), args.packages)
    elif args.command == "bootstrap":
        names = args.names or config.bootstrap.packages
        results = await check_and_install_npm_packages(
            runtime,
            names,
            config.packages_dir,
            auto_install=config.bootstrap.auto_install,
        )
        if NpmPackageStatus.FAILED in results.values():
            return 1

    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = load_config(args.project)
        return asyncio.run(run_command(args, config))
    except (NodeRuntimeError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
