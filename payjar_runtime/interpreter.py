"""
PayJar 解释器主入口模块

该模块协调词法分析、语法分析和执行三个阶段，是宿主（IDE、命令行）
使用解释器的唯一边界：

- run(source): 完整执行，返回输出行、成功标志、错误消息和警告
- validate(source): 只做词法和语法分析，用于轻量诊断
- run_tape(code, input_text): 执行纸带机程序

run() 是唯一的恢复边界：捕获所有失败并返回单条消息，失败前已输出的行仍保留在结果中。

使用方法：
    payjar run <file.pj> [--input LINE ...]
    payjar check <file.pj>
    payjar tape <file.bf> [--input TEXT]
"""

import sys
import logging
import argparse
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

try:
    from payjar_runtime.lexer import PayJarLexer
    from payjar_runtime.ast_parser import PayJarParser
    from payjar_runtime.evaluator import PayJarEvaluator
    from payjar_runtime.models import OutputSink
    from payjar_runtime.errors import PayJarError, error_category, format_error_for_user
    from payjar_runtime.tape_machine import DEFAULT_TAPE_LENGTH, run_tape
except ImportError:
    from lexer import PayJarLexer
    from ast_parser import PayJarParser
    from evaluator import PayJarEvaluator
    from models import OutputSink
    from errors import PayJarError, error_category, format_error_for_user
    from tape_machine import DEFAULT_TAPE_LENGTH, run_tape

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """一次 PayJar 运行的结果"""
    output: List[str] = field(default_factory=list)
    success: bool = True
    error: Optional[str] = None
    error_type: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'output': '\n'.join(self.output),
            'lines': list(self.output),
            'error': self.error,
            'error_type': self.error_type,
            'warnings': list(self.warnings),
        }


@dataclass
class ValidationResult:
    """词法/语法检查结果"""
    success: bool = True
    error: Optional[str] = None
    error_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'error': self.error,
            'error_type': self.error_type,
        }


def parse_source(source_text):
    """词法 + 语法分析，返回 Program 节点"""
    tokens = PayJarLexer(source_text).tokenize()
    return PayJarParser(tokens).parse()


def run(source_text: str, input_lines: Optional[List[str]] = None,
        on_output: Optional[Callable[[str], None]] = None) -> RunResult:
    """
    执行 PayJar 源码

    Args:
        source_text: 源代码
        input_lines: readln() 依次读取的输入行
        on_output: 每输出一行时回调（可选）

    Returns:
        RunResult: 失败时 output 中保留失败前已输出的行
    """
    sink = OutputSink(on_output)
    evaluator = None
    try:
        program = parse_source(source_text)
        evaluator = PayJarEvaluator(output=sink, input_lines=input_lines)
        evaluator.interpret(program)
    except Exception as e:
        message = format_error_for_user(e)
        if not isinstance(e, PayJarError):
            logger.error(f"执行过程中出现意外错误: {e!r}")
        logger.info(f"PayJar 运行失败: {message}")
        return RunResult(
            output=sink.lines,
            success=False,
            error=message,
            error_type=error_category(e),
            warnings=evaluator.warnings if evaluator else [],
        )
    return RunResult(output=sink.lines, warnings=evaluator.warnings)


def validate(source_text: str) -> ValidationResult:
    """只运行词法和语法分析，不执行"""
    try:
        parse_source(source_text)
    except PayJarError as e:
        return ValidationResult(success=False, error=e.message, error_type=error_category(e))
    except RecursionError as e:
        return ValidationResult(success=False, error=format_error_for_user(e), error_type='internal')
    return ValidationResult()


def _read_file(path):
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def cmd_run(args):
    """执行 PayJar 文件"""
    # 警告已由 evaluator 通过 logging 输出
    result = run(_read_file(args.file), input_lines=args.input, on_output=print)
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    return 0


def cmd_check(args):
    """检查 PayJar 文件语法"""
    result = validate(_read_file(args.file))
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    print("OK")
    return 0


def cmd_tape(args):
    """执行纸带机程序"""
    try:
        output = run_tape(_read_file(args.file), args.input, args.tape_length)
    except PayJarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    sys.stdout.write(output)
    return 0


def main(argv=None):
    """主入口点"""
    parser = argparse.ArgumentParser(
        prog='payjar',
        description="PayJar interpreter and tape machine",
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    run_parser = subparsers.add_parser('run', help='Run a PayJar program')
    run_parser.add_argument('file', help='PayJar source file')
    run_parser.add_argument('--input', '-i', action='append', default=[],
                            help='Input line for readln() (repeatable)')
    run_parser.set_defaults(func=cmd_run)

    check_parser = subparsers.add_parser('check', help='Lex and parse a PayJar program without running it')
    check_parser.add_argument('file', help='PayJar source file')
    check_parser.set_defaults(func=cmd_check)

    tape_parser = subparsers.add_parser('tape', help='Run a tape machine (Brainfuck) program')
    tape_parser.add_argument('file', help='Command file')
    tape_parser.add_argument('--input', '-i', default='', help='Input text for the , command')
    tape_parser.add_argument('--tape-length', type=int, default=DEFAULT_TAPE_LENGTH,
                             help='Initial tape length')
    tape_parser.set_defaults(func=cmd_tape)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if not hasattr(args, 'func'):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"Error: File not found - {e.filename}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
