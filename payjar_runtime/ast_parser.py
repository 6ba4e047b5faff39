"""
PayJar AST 解析器模块

该模块负责将词法分析器生成的 Token 序列解析为抽象语法树（AST），
是解释器的第二阶段。单 token 前看的递归下降解析，运算符优先级固定：

    expression := term (比较运算 term)*
    term       := factor (('+' | '-') factor)*
    factor     := unary | primary (('*' | '/' | '%') primary)*
    primary    := 字面量 | 模板字符串 | 标识符表达式 | readln | NEW | '(' expression ')'

关键类：
- PayJarParser: AST 解析器，将 Token 列表转换为 Program 节点

错误策略：不做任何恢复，第一处期望与实际 token 不符即抛出 PayJarSyntaxError。
"""

import re
import logging

try:
    from payjar_runtime.models import *
    from payjar_runtime.errors import PayJarSyntaxError
except ImportError:
    from models import *
    from errors import PayJarSyntaxError

logger = logging.getLogger(__name__)


COMPARISON_TOKENS = ('EQUAL_EQUAL', 'NOT_EQUAL', 'LESS_THAN', 'GREATER_THAN', 'LESS_EQUAL', 'GREATER_EQUAL')
ADDITIVE_TOKENS = ('PLUS', 'MINUS')
MULTIPLICATIVE_TOKENS = ('MULTIPLY', 'DIVIDE', 'MODULO')

# 模板中的 ${name}，name 为一串 ASCII 单词字符（可以数字开头）
_TEMPLATE_SPLICE = re.compile(r"\$\{(\w+)\}", re.ASCII)


def parse_template(content):
    """把模板字符串拆成字面量和变量引用交替的片段"""
    parts = []
    for i, piece in enumerate(_TEMPLATE_SPLICE.split(content)):
        if i % 2:
            parts.append(VariableAccess(piece))
        elif piece:
            parts.append(Literal(piece, 'string'))
    return TemplateString(parts)


class PayJarParser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0
        self.current_token = self.tokens[0] if tokens else None

    def advance(self):
        self.pos += 1
        if self.pos < len(self.tokens):
            self.current_token = self.tokens[self.pos]
        else:
            self.current_token = None

    def peek(self, offset=1):
        peek_pos = self.pos + offset
        if peek_pos < len(self.tokens):
            return self.tokens[peek_pos]
        return None

    def _current_type(self):
        return self.current_token.type if self.current_token else None

    def _check(self, *token_types):
        return self.current_token is not None and self.current_token.type in token_types

    def expect(self, token_type):
        """消费一个指定类型的 token 并返回它"""
        if self._check(token_type):
            token = self.current_token
            self.advance()
            return token
        raise PayJarSyntaxError.expected_token(token_type, self._current_type(), self.pos)

    def _unexpected(self, context):
        raise PayJarSyntaxError(
            f"Syntax Error: Unexpected token in {context}: {self._current_type() or 'EOF'}"
        )

    def parse(self):
        program = self.parse_program()
        logger.debug(f"语法分析完成，顶层语句 {len(program.body)} 条")
        return program

    def parse_program(self):
        self.expect('PUBLIC')
        self.expect('CLASS')
        name = self.current_token.value if self.current_token else None
        self.expect('MAIN')
        self.expect('LPAREN')
        self.expect('AT')
        self.expect('SELF')
        self.expect('RPAREN')
        self.expect('LBRACE')
        body = self.parse_statements('main body')
        self.expect('RBRACE')
        return Program(name, body)

    def parse_statements(self, context, allow_return=False):
        """解析语句直到遇到 '}' 或输入结束"""
        statements = []
        while self.current_token and self.current_token.type != 'RBRACE':
            statements.append(self.parse_statement(context, allow_return))
        return statements

    def parse_statement(self, context, allow_return=False):
        token_type = self._current_type()

        if token_type == 'RETURN' and allow_return:
            return self.parse_return_statement()
        if token_type == 'PRINT':
            return self.parse_print_statement()
        if token_type in DECLARATION_KINDS:
            return self.parse_variable_declaration()
        if token_type == 'DEF':
            return self.parse_function_definition()
        if token_type in ('PUBLIC', 'CLASS'):
            return self.parse_class_definition()
        if token_type in ('IDENTIFIER', 'SELF'):
            return self.parse_identifier_statement(context)

        self._unexpected(context)

    def parse_identifier_statement(self, context):
        next_token = self.peek()
        next_type = next_token.type if next_token else None

        if next_type == 'EQUAL' and self._check('IDENTIFIER'):
            return self.parse_assignment_statement()

        if next_type == 'DOT':
            name = self.current_token.value
            self.advance()
            node = self.parse_member_chain(VariableAccess(name), allow_assignment=True)
            # 只有方法调用语句需要分号，裸字段访问语句不消费分号
            if isinstance(node, MemberAccess) and node.is_call:
                self.expect('SEMICOLON')
            return node

        if next_type == 'LPAREN' and self._check('IDENTIFIER'):
            name = self.expect('IDENTIFIER').value
            node = self.parse_function_call(name)
            self.expect('SEMICOLON')
            return node

        self._unexpected(context)

    def parse_print_statement(self):
        self.expect('PRINT')
        self.expect('LPAREN')
        expr = self.parse_expression()
        self.expect('RPAREN')
        self.expect('SEMICOLON')
        return PrintStatement(expr)

    def parse_variable_declaration(self):
        kind = self.current_token.type
        self.advance()
        name = self.expect('IDENTIFIER').value
        self.expect('EQUAL')
        expr = self.parse_expression()
        self.expect('SEMICOLON')
        return VariableDeclaration(kind, name, expr)

    def parse_assignment_statement(self):
        name = self.expect('IDENTIFIER').value
        self.expect('EQUAL')
        expr = self.parse_expression()
        self.expect('SEMICOLON')
        return AssignmentStatement(name, expr)

    def parse_return_statement(self):
        self.expect('RETURN')
        expr = self.parse_expression()
        self.expect('SEMICOLON')
        return ReturnStatement(expr)

    # --- 表达式（按优先级递归下降） ---

    def parse_expression(self):
        left = self.parse_term()
        while self._check(*COMPARISON_TOKENS):
            op = self.current_token.value
            self.advance()
            right = self.parse_term()
            left = BinaryOp(left, op, right)
        return left

    def parse_term(self):
        left = self.parse_factor()
        while self._check(*ADDITIVE_TOKENS):
            op = self.current_token.value
            self.advance()
            right = self.parse_factor()
            left = BinaryOp(left, op, right)
        return left

    def parse_factor(self):
        # 一元运算只作用于紧随的 primary，之后不再接乘除
        if self._check(*ADDITIVE_TOKENS):
            op = self.current_token.value
            self.advance()
            return UnaryOp(op, self.parse_primary())

        left = self.parse_primary()
        while self._check(*MULTIPLICATIVE_TOKENS):
            op = self.current_token.value
            self.advance()
            right = self.parse_primary()
            left = BinaryOp(left, op, right)
        return left

    def parse_primary(self):
        token_type = self._current_type()

        if token_type == 'STRING_LITERAL':
            value = self.expect('STRING_LITERAL').value
            return Literal(value, 'string')

        if token_type == 'NUMBER':
            value = int(self.expect('NUMBER').value)
            return Literal(value, 'number')

        if token_type == 'BACKTICK_STRING':
            return parse_template(self.expect('BACKTICK_STRING').value)

        if token_type in ('IDENTIFIER', 'SELF'):
            name = self.current_token.value
            self.advance()
            if self._check('LPAREN') and token_type == 'IDENTIFIER':
                return self.parse_function_call(name)
            if self._check('DOT'):
                return self.parse_member_chain(VariableAccess(name), allow_assignment=False)
            return VariableAccess(name)

        if token_type == 'READLN':
            self.expect('READLN')
            self.expect('LPAREN')
            prompt = self.parse_expression()
            self.expect('RPAREN')
            return ReadInput(prompt)

        if token_type == 'NEW':
            return self.parse_new_expression()

        if token_type == 'LPAREN':
            self.expect('LPAREN')
            expr = self.parse_expression()
            self.expect('RPAREN')
            return expr

        self._unexpected('primary expression')

    def parse_arguments(self):
        args = []
        if self.current_token and self.current_token.type != 'RPAREN':
            args.append(self.parse_expression())
            while self._check('COMMA'):
                self.expect('COMMA')
                args.append(self.parse_expression())
        return args

    def parse_function_call(self, name):
        self.expect('LPAREN')
        args = self.parse_arguments()
        self.expect('RPAREN')
        return FunctionCall(name, args)

    def parse_member_chain(self, obj, allow_assignment=False):
        """
        解析 .member、.method(args) 组成的访问链

        allow_assignment 为 True 时（语句位置），链尾的 '= expr;' 使其成为成员赋值语句。
        """
        node = obj
        while self._check('DOT'):
            self.expect('DOT')
            member = self.expect('IDENTIFIER').value
            is_call = False
            args = []

            if self._check('LPAREN'):
                is_call = True
                self.expect('LPAREN')
                args = self.parse_arguments()
                self.expect('RPAREN')

            if allow_assignment and not is_call and self._check('EQUAL'):
                self.expect('EQUAL')
                expr = self.parse_expression()
                self.expect('SEMICOLON')
                return MemberAssignment(node, member, expr)

            node = MemberAccess(node, member, is_call, args)
        return node

    def parse_new_expression(self):
        self.expect('NEW')
        class_name = self.expect('IDENTIFIER').value
        self.expect('LPAREN')
        args = self.parse_arguments()
        self.expect('RPAREN')
        return ObjectCreation(class_name, args)

    # --- 函数与类定义 ---

    def parse_function_definition(self, is_method=False):
        self.expect('DEF')
        name = self.expect('IDENTIFIER').value
        self.expect('LPAREN')

        params = []
        if self.current_token and self.current_token.type != 'RPAREN':
            if self._check('SELF'):
                if not is_method:
                    raise PayJarSyntaxError(
                        "Syntax Error: The 'self' parameter is only allowed in class method definitions."
                    )
                params.append(self.expect('SELF').value)
            else:
                params.append(self.expect('IDENTIFIER').value)
            while self._check('COMMA'):
                self.expect('COMMA')
                params.append(self.expect('IDENTIFIER').value)
        self.expect('RPAREN')

        self.expect('LBRACE')
        body = self.parse_statements('function body', allow_return=True)
        self.expect('RBRACE')
        return FunctionDefinition(name, params, body, is_method)

    def parse_class_definition(self):
        if self._check('PUBLIC'):
            self.expect('PUBLIC')
        self.expect('CLASS')
        name = self.expect('IDENTIFIER').value
        self.expect('LPAREN')
        self.expect('AT')
        self.expect('INNERSELF')
        self.expect('RPAREN')
        self.expect('LBRACE')

        fields = []
        methods = {}
        ctor = None
        while self.current_token and self.current_token.type != 'RBRACE':
            if self._check('CONST', 'LET'):
                fields.append(self.parse_field_declaration())
            elif self._check('DEF'):
                method = self.parse_function_definition(is_method=True)
                if method.name != 'init':
                    methods[method.name] = method
                elif ctor is None:
                    ctor = method
                else:
                    raise PayJarSyntaxError(
                        f"Syntax Error: Duplicate constructor 'init' in class '{name}'."
                    )
            else:
                self._unexpected('class body')
        self.expect('RBRACE')
        return ClassDefinition(name, fields, methods, ctor)

    def parse_field_declaration(self):
        kind = self.current_token.type
        self.advance()
        name = self.expect('IDENTIFIER').value
        expr = None
        if self._check('EQUAL'):
            self.expect('EQUAL')
            expr = self.parse_expression()
        self.expect('SEMICOLON')
        return FieldDeclaration(kind, name, expr)
