"""Exception hierarchy shared by the loader, evaluator and engine."""


class RulifyError(Exception):
    """Base class for all rulify errors."""

    pass


class NullArgumentError(RulifyError, ValueError):
    """Raised when a required argument is None or blank."""

    def __init__(self, argument: str):
        super().__init__(f"Argument must not be None: {argument}")
        self.argument = argument


class RuleFileNotFoundError(RulifyError, FileNotFoundError):
    """Raised when a rule document path does not exist."""

    pass


class ParseError(RulifyError, ValueError):
    """Raised when a rule document or expression cannot be parsed."""

    pass


class ExpressionError(RulifyError):
    """Base class for faults raised while evaluating an expression."""

    pass


class ExpressionParseError(ExpressionError, ParseError):
    """Raised when expression text is structurally malformed."""

    pass


class UnresolvedReferenceError(ExpressionError, LookupError):
    """Raised when a bare name is neither a literal nor bound in scope."""

    def __init__(self, name: str):
        super().__init__(f"Unresolved reference: {name}")
        self.name = name


class DivideByZeroError(ExpressionError, ZeroDivisionError):
    """Raised when the right operand of a division evaluates to zero."""

    pass


class InvalidExpressionError(ExpressionError, ValueError):
    """Raised for malformed assignments and unevaluable fragments."""

    pass
