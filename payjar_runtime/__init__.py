"""
PayJar 解释器包

PayJar 是一种支持类的极简命令式语言；本包同时提供一个独立的
Brainfuck 风格纸带机引擎。
"""

__version__ = "1.0.0"

# 导出主要类，方便外部使用
from .errors import (
    PayJarError, PayJarLexError, PayJarSyntaxError, PayJarRuntimeError,
    TapeSyntaxError, TapeRuntimeError, format_error_for_user
)
from .lexer import PayJarLexer, Token
from .ast_parser import PayJarParser
from .evaluator import PayJarEvaluator, stringify
from .models import OutputSink, PayJarObject, Program
from .tape_machine import TapeMachine, run_tape, run_esolang, DEFAULT_TAPE_LENGTH
from .interpreter import RunResult, ValidationResult, run, validate, parse_source, main
