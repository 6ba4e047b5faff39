"""
PayJar 词法分析器模块

该模块负责将 PayJar 源代码转换为 Token 序列，是解释器的第一阶段。
扫描前先删除 // 单行注释和 /* */ 块注释（不支持嵌套，最短匹配）。
Token 按需逐个产生（get_next_token），tokenize() 将其收集为列表，
列表末尾不附加 EOF 标记，取尽即为结束。

关键类：
- Token: 表示单个词法单元，包含类型和值
- PayJarLexer: 词法分析器，将源代码字符串转换为 Token 列表
"""

import re
import logging

try:
    from payjar_runtime.errors import PayJarLexError
except ImportError:
    from errors import PayJarLexError

logger = logging.getLogger(__name__)


KEYWORDS = {
    'public': 'PUBLIC',
    'private': 'PRIVATE',
    'class': 'CLASS',
    'main': 'MAIN',
    'self': 'SELF',
    'innerSelf': 'INNERSELF',
    'inner_self': 'INNERSELF',
    'func': 'DEF',
    'println': 'PRINT',
    'pass': 'PASS',
    'let': 'LET',
    'const': 'CONST',
    'var': 'VAR',
    'NEW': 'NEW',
    'readln': 'READLN',
    'return': 'RETURN',
}

# 双字符运算符必须先于其单字符前缀匹配
DOUBLE_CHAR_TOKENS = {
    '==': 'EQUAL_EQUAL',
    '!=': 'NOT_EQUAL',
    '<=': 'LESS_EQUAL',
    '>=': 'GREATER_EQUAL',
}

SINGLE_CHAR_TOKENS = {
    '+': 'PLUS',
    '-': 'MINUS',
    '*': 'MULTIPLY',
    '/': 'DIVIDE',
    '%': 'MODULO',
    '(': 'LPAREN',
    ')': 'RPAREN',
    '{': 'LBRACE',
    '}': 'RBRACE',
    ';': 'SEMICOLON',
    ',': 'COMMA',
    '.': 'DOT',
    '@': 'AT',
    '=': 'EQUAL',
    '<': 'LESS_THAN',
    '>': 'GREATER_THAN',
}

DIGITS = '0123456789'

_LINE_COMMENT = re.compile(r'//.*$', re.MULTILINE)
_BLOCK_COMMENT = re.compile(r'/\*[\s\S]*?\*/')


def strip_comments(text):
    """删除单行注释和块注释"""
    text = _LINE_COMMENT.sub('', text)
    return _BLOCK_COMMENT.sub('', text)


class Token:
    def __init__(self, type, value):
        self.type = type
        self.value = value

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __hash__(self):
        return hash((self.type, self.value))

    def __repr__(self):
        return f'Token({self.type}, {self.value})'


class PayJarLexer:
    def __init__(self, text):
        self.text = strip_comments(text)
        self.pos = 0
        self.current_char = self.text[0] if self.text else None

    def advance(self):
        self.pos += 1
        if self.pos > len(self.text) - 1:
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def peek(self):
        """查看下一个字符但不移动位置"""
        peek_pos = self.pos + 1
        if peek_pos > len(self.text) - 1:
            return None
        return self.text[peek_pos]

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char.isspace():
            self.advance()

    @staticmethod
    def _is_ident_start(char):
        return char.isascii() and (char.isalpha() or char == '_')

    @staticmethod
    def _is_ident_char(char):
        return char.isascii() and (char.isalnum() or char == '_')

    def number(self):
        result = ''
        while self.current_char is not None and self.current_char in DIGITS:
            result += self.current_char
            self.advance()
        return result

    def identifier(self):
        result = ''
        while self.current_char is not None and self._is_ident_char(self.current_char):
            result += self.current_char
            self.advance()
        return result

    def string(self, quote_char):
        """读取到匹配引号为止的原始字符，不处理转义"""
        result = ''
        self.advance()  # 跳过开始引号
        while self.current_char is not None and self.current_char != quote_char:
            result += self.current_char
            self.advance()
        if self.current_char != quote_char:
            raise PayJarLexError("Lexer Error: Unterminated string literal")
        self.advance()  # 跳过结束引号
        return result

    def get_next_token(self):
        """返回下一个 Token；输入耗尽时返回 None"""
        self.skip_whitespace()
        if self.current_char is None:
            return None

        char = self.current_char

        if self._is_ident_start(char):
            ident = self.identifier()
            return Token(KEYWORDS.get(ident, 'IDENTIFIER'), ident)

        if char in DIGITS:
            return Token('NUMBER', self.number())

        if char in ('"', "'"):
            return Token('STRING_LITERAL', self.string(char))

        if char == '`':
            return Token('BACKTICK_STRING', self.string('`'))

        pair = char + (self.peek() or '')
        if pair in DOUBLE_CHAR_TOKENS:
            self.advance()
            self.advance()
            return Token(DOUBLE_CHAR_TOKENS[pair], pair)

        if char in SINGLE_CHAR_TOKENS:
            self.advance()
            return Token(SINGLE_CHAR_TOKENS[char], char)

        # 包括单独出现的 '!'
        raise PayJarLexError(f"Lexer Error: Invalid character: {char}")

    def __iter__(self):
        token = self.get_next_token()
        while token is not None:
            yield token
            token = self.get_next_token()

    def tokenize(self):
        tokens = list(self)
        logger.debug(f"词法分析完成，共 {len(tokens)} 个 token")
        return tokens
