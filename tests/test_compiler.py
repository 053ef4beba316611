import pytest

from tank.compiler import TankCompiler, compile_source, compile_sources, output_path
from tank.exceptions import CompileError
from tests.helpers import write


class TestCompileFile:

    def test_writes_html_next_to_template(self, tmp_path):
        src = write(tmp_path / "index.tank", "h1() -> Hello\n")
        html = TankCompiler().compile_file(src)
        assert html == "<h1>\n  Hello\n</h1>\n"
        assert (tmp_path / "index.html").read_text() == html

    def test_output_path(self, tmp_path):
        assert output_path(tmp_path / "pages" / "about.tank") == tmp_path / "pages" / "about.html"

    def test_output_is_appended(self, tmp_path):
        src = write(tmp_path / "index.tank", "p() -> hi\n")
        compiler = TankCompiler()
        compiler.compile_file(src)
        compiler.compile_file(src)
        assert (tmp_path / "index.html").read_text() == "<p>\n  hi\n</p>\n" * 2
        assert compiler.diagnostics.warnings == [
            f"tank: Appending to existing output {tmp_path / 'index.html'}"
        ]

    def test_clean_replaces_output(self, tmp_path):
        src = write(tmp_path / "index.tank", "p() -> hi\n")
        compiler = TankCompiler()
        compiler.compile_file(src)
        compiler.compile_file(src, clean=True)
        assert (tmp_path / "index.html").read_text() == "<p>\n  hi\n</p>\n"
        assert not compiler.diagnostics.has_diag

    def test_failed_compile_writes_nothing(self, tmp_path):
        src = write(tmp_path / "broken.tank", "p() -> hi &missing\n")
        with pytest.raises(CompileError):
            TankCompiler().compile_file(src)
        assert not (tmp_path / "broken.html").exists()

    def test_no_write(self, tmp_path):
        src = write(tmp_path / "index.tank", "p() -> hi\n")
        TankCompiler().compile_file(src, write=False)
        assert not (tmp_path / "index.html").exists()

    def test_missing_template(self, tmp_path):
        with pytest.raises(OSError):
            TankCompiler().compile_file(tmp_path / "nope.tank")

    def test_each_compilation_has_its_own_symbols(self, tmp_path):
        src = write(tmp_path / "index.tank", "let x: int = 1\np() -> &x\n")
        compiler = TankCompiler()
        compiler.compile_file(src, write=False)
        assert compiler.compile_file(src, write=False) == "<p>\n  1\n</p>\n"


class TestVariables:

    def test_variables_seed_every_compilation(self):
        compiler = TankCompiler({"site": "Example"})
        assert compiler.compile("title() -> &site") == "<title>\n  Example\n</title>\n"
        assert compiler.compile("h1() -> &site") == "<h1>\n  Example\n</h1>\n"

    def test_let_cannot_redeclare_a_config_variable(self):
        with pytest.raises(CompileError, match="Redeclared symbol site found"):
            compile_source("let site: string = Other", {"site": "Example"})


class TestIncludes:

    def test_inlines_existing_html(self, tmp_path):
        write(tmp_path / "footer.html", "<footer>(c)</footer>\n")
        src = write(tmp_path / "index.tank", "p() -> hi\ninclude footer\n")
        html = TankCompiler().compile_file(src)
        assert html == "<p>\n  hi\n</p>\n<footer>(c)</footer>\n"

    def test_compiles_template_when_no_html(self, tmp_path):
        write(tmp_path / "footer.tank", "footer() -> bye\n")
        src = write(tmp_path / "index.tank", "include footer\n")
        html = TankCompiler().compile_file(src)
        assert html == "<footer>\n  bye\n</footer>\n"
        assert (tmp_path / "footer.html").read_text() == "<footer>\n  bye\n</footer>\n"

    def test_include_as_element_body_closes_tags(self, tmp_path):
        write(tmp_path / "nav.html", "<a>home</a>\n")
        src = write(tmp_path / "index.tank", "header() -> include nav\n")
        html = TankCompiler().compile_file(src)
        assert html == "<header>\n<a>home</a>\n</header>\n"

    def test_included_template_sees_config_variables(self, tmp_path):
        write(tmp_path / "footer.tank", "footer() -> &owner\n")
        src = write(tmp_path / "index.tank", "include footer\n")
        html = TankCompiler({"owner": "ACME"}).compile_file(src)
        assert html == "<footer>\n  ACME\n</footer>\n"

    def test_included_template_has_its_own_declarations(self, tmp_path):
        write(tmp_path / "part.tank", "let x: int = 2\np() -> &x\n")
        src = write(tmp_path / "index.tank", "let x: int = 1\ninclude part\ni() -> &x\n")
        html = TankCompiler().compile_file(src)
        assert html == "<p>\n  2\n</p>\n<i>\n  1\n</i>\n"

    def test_missing_include(self, tmp_path):
        src = write(tmp_path / "index.tank", "include nothing\n")
        with pytest.raises(CompileError) as exc_info:
            TankCompiler().compile_file(src)
        assert exc_info.value.diagnostics.errors == [
            f"tank: Unable to open file {tmp_path / 'nothing.tank'}"
        ]

    def test_undecodable_included_html(self, tmp_path):
        (tmp_path / "nav.html").write_bytes(b"<a>caf\xe9</a>\n")
        src = write(tmp_path / "index.tank", "include nav\n")
        with pytest.raises(CompileError, match="Unable to read file"):
            TankCompiler().compile_file(src)
        assert not (tmp_path / "index.html").exists()

    def test_undecodable_included_template(self, tmp_path):
        (tmp_path / "part.tank").write_bytes(b"p() -> caf\xe9\n")
        src = write(tmp_path / "index.tank", "include part\n")
        with pytest.raises(CompileError, match="Unable to open file"):
            TankCompiler().compile_file(src)

    def test_self_include(self, tmp_path):
        src = write(tmp_path / "loop.tank", "include loop\n")
        with pytest.raises(CompileError, match="Circular include"):
            TankCompiler().compile_file(src)

    def test_circular_include(self, tmp_path):
        write(tmp_path / "a.tank", "include b\n")
        write(tmp_path / "b.tank", "include a\n")
        with pytest.raises(CompileError, match="Circular include"):
            TankCompiler().compile_file(tmp_path / "a.tank")
        assert not (tmp_path / "a.html").exists()
        assert not (tmp_path / "b.html").exists()

    def test_failing_include_reports_its_errors(self, tmp_path):
        write(tmp_path / "part.tank", "p() -> &missing\n")
        src = write(tmp_path / "index.tank", "include part\n")
        with pytest.raises(CompileError) as exc_info:
            TankCompiler().compile_file(src)
        assert exc_info.value.diagnostics.errors == ["tank: Undefined variable missing"]


class TestCompileSources:

    def test_reports_and_continues(self, tmp_path, capsys):
        good = write(tmp_path / "good.tank", "p() -> ok\n")
        bad = write(tmp_path / "bad.tank", "p() -> (\n")
        failures = compile_sources([bad, good], TankCompiler())
        assert failures == 1
        assert (tmp_path / "good.html").exists()

        out = capsys.readouterr().out
        assert "tank: Parse error at line 1, pos 8 - Unexpected LPAREN" in out
        assert out.endswith("\n\n")

    def test_missing_file(self, tmp_path, capsys):
        failures = compile_sources([tmp_path / "nope.tank"], TankCompiler())
        assert failures == 1
        assert "tank: Failed to open" in capsys.readouterr().out

    def test_undecodable_file_does_not_stop_the_batch(self, tmp_path, capsys):
        bad = tmp_path / "bad.tank"
        bad.write_bytes(b"p() -> caf\xe9\n")
        good = write(tmp_path / "good.tank", "p() -> ok\n")
        failures = compile_sources([bad, good], TankCompiler())
        assert failures == 1
        assert (tmp_path / "good.html").read_text() == "<p>\n  ok\n</p>\n"
        assert not (tmp_path / "bad.html").exists()
        assert f"tank: Failed to read {bad}" in capsys.readouterr().out
