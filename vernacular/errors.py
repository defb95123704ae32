from dataclasses import dataclass


@dataclass
class ErrorVal:
    """A failure reported by any stage of the pipeline.

    `kind` is one of LexError, ParseError, TypeError, GenError,
    StackUnderflow, UndefinedVariable, TypeMismatch, UnknownFunction,
    CastError, Unimplemented or IOError.
    """
    kind: str
    message: str

    def __repr__(self) -> str:
        return f"Error(kind={self.kind!r}, message={self.message!r})"


class VernacularError(Exception):
    """Exception type used to propagate Vernacular errors to the caller."""
    def __init__(self, err: ErrorVal):
        super().__init__(f"{err.kind}: {err.message}")
        self.err = err

    @property
    def kind(self) -> str:
        return self.err.kind


def fail(kind: str, message: str) -> VernacularError:
    return VernacularError(ErrorVal(kind, message))
