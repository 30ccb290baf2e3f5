"""Exceptions raised by the Fourier Lab core."""


class FourierLabError(Exception):
    pass


class ParseError(FourierLabError, ValueError):
    """Expression text is not in the grammar."""

    def __init__(self, message, text="", position=None):
        self.text = text
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class EvaluationError(FourierLabError, ArithmeticError):
    """A function could not be evaluated at ``x``."""

    def __init__(self, x, expression=""):
        self.x = x
        self.expression = expression
        where = f" of '{expression}'" if expression else ""
        super().__init__(f"evaluation{where} failed at x={x!r}")


class InvalidParameter(FourierLabError, ValueError):
    pass
