"""
纸带机模块

与 PayJar 语言完全独立的第二个引擎：在字节纸带上执行 8 条命令
（> < + - . , [ ]）的 Brainfuck 风格语言。

关键类：
- TapeMachine: 纸带虚拟机，每次运行持有独立的纸带、指针和输入游标

主要函数：
- run_tape: 执行命令文本并返回输出字符串
- run_esolang: 按语言名分派（目前只支持 brainfuck）
"""

import re
import logging

try:
    from payjar_runtime.errors import PayJarError, TapeSyntaxError, TapeRuntimeError
except ImportError:
    from errors import PayJarError, TapeSyntaxError, TapeRuntimeError

logger = logging.getLogger(__name__)


DEFAULT_TAPE_LENGTH = 30000

_NON_COMMAND = re.compile(r'[^\[\]<>+\-.,]')


def build_jump_table(code):
    """
    为每个 '[' 和与之匹配的 ']' 建立双向跳转表

    Raises:
        TapeSyntaxError: 存在未匹配的括号
    """
    stack = []
    jumps = {}
    for i, char in enumerate(code):
        if char == '[':
            stack.append(i)
        elif char == ']':
            if not stack:
                raise TapeSyntaxError(f"Syntax Error: Unmatched ']' at position {i}", position=i)
            start = stack.pop()
            jumps[start] = i
            jumps[i] = start
    if stack:
        position = stack[-1]
        raise TapeSyntaxError(f"Syntax Error: Unmatched '[' at position {position}", position=position)
    return jumps


class TapeMachine:
    def __init__(self, code, input_text='', tape_length=DEFAULT_TAPE_LENGTH, max_steps=None):
        self.code = _NON_COMMAND.sub('', code)
        self.cells = [0] * max(1, tape_length)
        self.pointer = 0
        self.input = input_text
        self.input_pointer = 0
        self.output = []
        self.max_steps = max_steps  # 执行命令数上限，None 表示不限
        self.steps = 0

    def run(self):
        code = self.code
        jumps = build_jump_table(code)

        i = 0
        while i < len(code):
            self.steps += 1
            if self.max_steps is not None and self.steps > self.max_steps:
                raise TapeRuntimeError(f"Runtime Error: Step limit of {self.max_steps} exceeded.")
            command = code[i]
            if command == '>':
                self.pointer += 1
                if self.pointer >= len(self.cells):
                    self.cells.append(0)
            elif command == '<':
                if self.pointer == 0:
                    raise TapeRuntimeError("Runtime Error: Data pointer moved left of tape start.")
                self.pointer -= 1
            elif command == '+':
                self.cells[self.pointer] = (self.cells[self.pointer] + 1) % 256
            elif command == '-':
                self.cells[self.pointer] = (self.cells[self.pointer] - 1) % 256
            elif command == '.':
                self.output.append(chr(self.cells[self.pointer]))
            elif command == ',':
                self.cells[self.pointer] = self._read_input()
            elif command == '[':
                if self.cells[self.pointer] == 0:
                    i = jumps[i]
            elif command == ']':
                if self.cells[self.pointer] != 0:
                    i = jumps[i]
            i += 1

        return ''.join(self.output)

    def _read_input(self):
        # 输入耗尽时置 0，不报错
        if self.input_pointer >= len(self.input):
            return 0
        char = self.input[self.input_pointer]
        self.input_pointer += 1
        return ord(char) % 256


def run_tape(command_text, input_text='', tape_length=DEFAULT_TAPE_LENGTH, max_steps=None):
    """执行纸带程序，返回输出字符串；括号不匹配、指针越界或超出步数上限时抛出异常"""
    machine = TapeMachine(command_text, input_text, tape_length, max_steps)
    output = machine.run()
    logger.debug(f"纸带程序执行完成，输出 {len(output)} 个字符")
    return output


ESOLANGS = {
    'brainfuck': run_tape,
}


def run_esolang(code, language='brainfuck', input_text='', **kwargs):
    """按语言名执行深奥语言程序"""
    runner = ESOLANGS.get(language or 'brainfuck')
    if runner is None:
        raise PayJarError(f"Unsupported esoteric language: {language}")
    return runner(code, input_text, **kwargs)
