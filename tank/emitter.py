import io
from typing import Optional, TextIO

LEFT_ANGLE_BRACKET = '<'
RIGHT_ANGLE_BRACKET = '>'
CLOSING_TAG = '</'
EQUALS = '='
QUOTE = '"'
NEWLINE = '\n'


class Emitter:
    """Low level html writer. Appends to `sink`, an in-memory buffer by default."""

    def __init__(self, sink: Optional[TextIO] = None):
        self.sink = sink if sink is not None else io.StringIO()

    def emit(self, output: str):
        self.sink.write(output)

    def left_angle_bracket(self):
        self.emit(LEFT_ANGLE_BRACKET)

    def right_angle_bracket(self):
        self.emit(RIGHT_ANGLE_BRACKET)

    def equals(self):
        self.emit(EQUALS)

    def close_element(self, name: str):
        self.emit(f"{CLOSING_TAG}{name}{RIGHT_ANGLE_BRACKET}{NEWLINE}")

    def space(self, count: int):
        if count > 0:
            self.emit(' ' * count)

    def string(self, value: str):
        self.emit(f"{QUOTE}{value}{QUOTE}")

    def newline(self):
        self.emit(NEWLINE)

    def getvalue(self) -> str:
        return self.sink.getvalue()
