"""Interactive session driving the Vernacular pipeline.

A `Session` owns the state that outlives a single fragment: the variable
environment (values and declared types), one tokenizer and the virtual
machine. Each call to `run_fragment` pushes one piece of source through

    preprocess -> tokenize -> parse -> analyze -> generate -> execute

with a fresh parser, analyzer and generator. A failure before execution
leaves the environment untouched.

Unless `trace` is turned off, every successfully compiled fragment prints
its tokens, AST and bytecode to stdout before it runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from lark import Token

from .analyzer import Analyzer
from .ast import Node
from .bytecode import OpCode
from .environment import Environment
from .errors import fail
from .generator import BytecodeGenerator
from .parser import Parser
from .tokenizer import Tokenizer, preprocess
from .vm import VirtualMachine


@dataclass
class CompiledFragment:
    tokens: List[Token]
    ast: List[Node]
    bytecode: List[OpCode]


class Session:
    def __init__(self, trace: bool = True, debug_level: int = 0, debug_file: str = 'debug.txt'):
        self.trace = trace
        self.debug_level = debug_level
        self.debug_fp = open(debug_file, 'w', encoding='utf-8') if debug_level > 0 else None
        self.env = Environment()
        self.tokenizer = Tokenizer()
        self.vm = VirtualMachine(self.env, debug=self.debug)

    def debug(self, msg: str, level: int = 1):
        if self.debug_level >= level and self.debug_fp:
            self.debug_fp.write(msg + '\n')
            self.debug_fp.flush()

    def close(self):
        if self.debug_fp:
            self.debug_fp.close()
            self.debug_fp = None

    def compile_fragment(self, text: str) -> CompiledFragment:
        source = preprocess(text)
        self.debug(f"fragment: {source!r}")
        tokens = self.tokenizer.tokenize(source)
        self.debug(f"tokenized: {len(tokens)} tokens")
        ast = Parser(tokens, self.tokenizer).parse()
        self.debug(f"parsed: {len(ast)} statements")
        Analyzer(self.env.types).analyze(ast)
        self.debug("analysis passed")
        bytecode = BytecodeGenerator().generate(ast)
        self.debug(f"generated: {len(bytecode)} instructions")
        return CompiledFragment(tokens, ast, bytecode)

    def print_trace(self, fragment: CompiledFragment):
        print("Tokens:")
        for token in fragment.tokens:
            print(f"  {token!r}")
        print("\nAST:")
        for node in fragment.ast:
            print(f"  {node!r}")
        print("\nBytecode:")
        for index, op in enumerate(fragment.bytecode):
            print(f"  {index:4d}: {op!r}")

    def run_fragment(self, text: str) -> None:
        """Compile and execute one fragment against the session state."""
        fragment = self.compile_fragment(text)
        if self.trace:
            self.print_trace(fragment)
        self.vm.execute(fragment.bytecode)
        self.debug("executed")

    def run_file(self, file_path: str) -> None:
        """Run a whole UTF-8 source file as a single fragment."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise fail('IOError', f"Error reading file '{file_path}': {e}")
        print(f"Running file: {file_path}")
        self.run_fragment(content)


def run_source(source: str, trace: bool = False) -> Session:
    """Convenience function to run a program from source in a new session."""
    session = Session(trace=trace)
    session.run_fragment(source)
    return session
