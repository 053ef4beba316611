import argparse
import logging
import sys
from pathlib import Path

from .compiler import TankCompiler, compile_sources
from .config import load_config
from .exceptions import ConfigError
from .generator import TANK_EXT
from .watcher import run_watcher


def collect_sources(path: Path):
    """A single template, or every template directly inside a directory."""
    if path.is_dir():
        return sorted(p for p in path.iterdir() if p.is_file() and p.suffix == TANK_EXT)
    return [path]


def build_parser():
    parser = argparse.ArgumentParser(
                        prog='tank',
                        description='Compiles tank templates to html',
                        epilog='Output is appended to <name>.html next to each template')
    parser.add_argument('path', help='a .tank file or a directory of them')
    parser.add_argument('config', nargs='?',
                        help='YAML or JSON file of variables shared by all templates')
    parser.add_argument('--clean', action='store_true',
                        help='replace existing output instead of appending to it')
    parser.add_argument('--watch', action='store_true',
                        help='recompile whenever a template changes')
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s - %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    path = Path(args.path)
    if not path.exists():
        print(f"tank: Failed to open {path}: no such file or directory")
        return 1

    try:
        variables = load_config(args.config) if args.config else {}
    except ConfigError as e:
        print(f"tank: {e}")
        return 1

    compiler = TankCompiler(variables)
    sources = collect_sources(path)
    if not sources:
        print(f"tank: No {TANK_EXT} files found in {path}")
        return 1

    if args.watch:
        run_watcher(sources, compiler)
        return 0

    failures = compile_sources(sources, compiler, clean=args.clean)
    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
