import textwrap
from pathlib import Path

from tank.parser import Parser
from tank.symbols import SymbolTable


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip())
    return path


def parse_source(source: str, symbol_table: SymbolTable = None):
    return Parser(textwrap.dedent(source), symbol_table).parse()
