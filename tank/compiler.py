import logging
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional, Union

from .diagnostics import Diagnostics
from .exceptions import CompileError
from .generator import HTML_EXT, Generator
from .nodes import Node
from .parser import Parser
from .symbols import SymbolTable

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class TankCompiler:
    """
    Tank Compiler
    Compiles tank templates to HTML.

    Every compilation gets a fresh symbol table seeded with `variables`
    (usually loaded from a config file), then runs the parser and the
    generator. Each phase stops the compilation with a CompileError when it
    recorded errors; the diagnostics of the last compilation stay available
    in `self.diagnostics`, warnings included.

    Output files are opened for append. Pass `clean=True` to `compile_file`
    to start from an empty file instead.
    """

    def __init__(self, variables: Optional[Mapping[str, str]] = None,
                 including: FrozenSet[Path] = frozenset()):
        self.variables: Dict[str, str] = dict(variables or {})
        self.including = including
        self.diagnostics = Diagnostics()
        self.symbol_table = SymbolTable()

    def parse(self, source: str) -> Node:
        """Parses `source` into a Template tree, seeding the symbol table from the config."""
        self.diagnostics = Diagnostics()
        self.symbol_table = SymbolTable.from_mapping(self.variables)
        parser = Parser(source, self.symbol_table, self.diagnostics)
        return parser.parse()

    def compile(self, source: str, directory: PathLike = '.', path: Optional[Path] = None) -> str:
        """Compiles tank source code to HTML. Includes are looked up in `directory`."""
        ast = self.parse(source)

        including = self.including
        if path is not None:
            including = including | {path.resolve()}

        generator = Generator(self.symbol_table,
                              diagnostics=self.diagnostics,
                              directory=directory,
                              including=including,
                              compile_include=self._include_compiler(including))
        return generator.output(ast)

    def compile_file(self, path: PathLike, write: bool = True, clean: bool = False) -> str:
        """
        Compiles the template at `path` and appends the result to the
        matching .html file. Nothing is written when compilation fails.
        """
        path = Path(path)
        logger.info("tank: Compiling '%s'...", path)

        source = path.read_text(encoding="utf-8")
        html = self.compile(source, directory=path.parent, path=path)

        if write:
            self.write_output(output_path(path), html, clean)
        return html

    def write_output(self, destination: Path, html: str, clean: bool = False):
        if clean and destination.exists():
            destination.unlink()
        elif destination.exists():
            self.diagnostics.warning(f"Appending to existing output {destination}")

        with open(destination, "a", encoding="utf-8") as f:
            f.write(html)

    def _include_compiler(self, including: FrozenSet[Path]):
        def compile_include(tank_path: Path) -> str:
            child = TankCompiler(self.variables, including=including)
            html = child.compile_file(tank_path)
            self.diagnostics.warnings.extend(child.diagnostics.warnings)
            return html
        return compile_include


def output_path(path: PathLike) -> Path:
    """`pages/index.tank` -> `pages/index.html`"""
    return Path(path).with_suffix(HTML_EXT)


def compile_source(source: str, variables: Optional[Mapping[str, str]] = None,
                   directory: PathLike = '.') -> str:
    return TankCompiler(variables).compile(source, directory=directory)


def compile_sources(sources, compiler: TankCompiler, clean: bool = False) -> int:
    """
    Compiles each template in turn, printing the diagnostics of every file.
    A failing template does not stop the others. Returns the number of failures.
    """
    failures = 0
    for src in sources:
        try:
            compiler.compile_file(src, clean=clean)
        except CompileError as e:
            failures += 1
            e.diagnostics.print_diag()
            continue
        except OSError as e:
            failures += 1
            print(f"tank: Failed to open {src}: {e.strerror or e}")
            print()
            continue
        except UnicodeDecodeError as e:
            failures += 1
            print(f"tank: Failed to read {src}: {e.reason} at byte {e.start}")
            print()
            continue
        if compiler.diagnostics.has_diag:
            compiler.diagnostics.print_diag()
    return failures
