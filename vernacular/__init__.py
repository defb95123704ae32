# Vernacular language package
# This package provides the tokenizer, parser, type analyzer, bytecode
# generator and virtual machine for the Vernacular scripting language.
from .errors import VernacularError, ErrorVal
from .session import Session, run_source

__all__ = [
    'Session',
    'run_source',
    'VernacularError',
    'ErrorVal',
]
