import io

from tank.emitter import Emitter


class TestEmitter:

    def test_primitives(self):
        emitter = Emitter()
        emitter.space(2)
        emitter.left_angle_bracket()
        emitter.emit("a")
        emitter.space(1)
        emitter.emit("href")
        emitter.equals()
        emitter.string("home")
        emitter.right_angle_bracket()
        emitter.newline()
        emitter.close_element("a")
        assert emitter.getvalue() == '  <a href="home">\n</a>\n'

    def test_zero_spaces(self):
        emitter = Emitter()
        emitter.space(0)
        assert emitter.getvalue() == ""

    def test_writes_to_given_sink(self):
        sink = io.StringIO()
        Emitter(sink).close_element("p")
        assert sink.getvalue() == "</p>\n"
