from .compiler import TankCompiler, compile_source, output_path
from .diagnostics import Diagnostics
from .exceptions import (CompileError, ConfigError, EvalError, GenError, IncludeError,
                         ParseError, SymbolError, TankError)
from .parser import Parser, parse

__version__ = '0.1.0'
