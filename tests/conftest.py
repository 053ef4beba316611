import textwrap

import pytest

from tank.compiler import TankCompiler


@pytest.fixture
def render():
    """Compiles template text in memory and returns the html."""
    def _render(source: str, variables=None, directory='.'):
        return TankCompiler(variables).compile(textwrap.dedent(source), directory=directory)
    return _render
