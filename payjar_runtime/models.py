"""
PayJar 数据模型模块

该模块定义了 PayJar 解释器使用的所有数据结构和 AST 节点类型。
每种语句和表达式对应一个节点类，执行器按节点类分派。

关键组件：
- Program: 程序根节点（public class main(@self) { ... }）
- 表达式类：Literal, VariableAccess, TemplateString, FunctionCall, ObjectCreation,
  MemberAccess, BinaryOp, UnaryOp, ReadInput
- 语句类：PrintStatement, VariableDeclaration, AssignmentStatement, ReturnStatement,
  FunctionDefinition, ClassDefinition, MemberAssignment
- 运行时：Binding, PayJarObject, ReturnValue, OutputSink
"""

# 声明种类
LET = 'LET'
CONST = 'CONST'
VAR = 'VAR'
DECLARATION_KINDS = (LET, CONST, VAR)


# 表达式和语句的基类
class Node:
    def __repr__(self):
        fields = ', '.join(f'{k}={v!r}' for k, v in vars(self).items())
        return f'{type(self).__name__}({fields})'

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    __hash__ = None


class Expression(Node):
    pass


class Statement(Node):
    pass


class Program(Node):
    def __init__(self, name, body):
        self.name = name
        self.body = body  # 顶层语句列表


# 字面量
class Literal(Expression):
    def __init__(self, value, data_type):
        self.value = value
        self.data_type = data_type  # "string" 或 "number"


class TemplateString(Expression):
    def __init__(self, parts):
        self.parts = parts  # Literal 与 VariableAccess 交替组成的列表


# 表达式
class VariableAccess(Expression):
    def __init__(self, name):
        self.name = name


class FunctionCall(Expression):
    def __init__(self, name, args):
        self.name = name
        self.args = args


class ObjectCreation(Expression):
    def __init__(self, class_name, args):
        self.class_name = class_name
        self.args = args


class MemberAccess(Expression):
    def __init__(self, obj, member, is_call=False, args=None):
        self.obj = obj
        self.member = member
        self.is_call = is_call
        self.args = args if args is not None else []


class BinaryOp(Expression):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op
        self.right = right


class UnaryOp(Expression):
    def __init__(self, op, operand):
        self.op = op
        self.operand = operand


class ReadInput(Expression):
    def __init__(self, prompt):
        self.prompt = prompt


# 语句
class PrintStatement(Statement):
    def __init__(self, expr):
        self.expr = expr


class VariableDeclaration(Statement):
    def __init__(self, kind, name, expr):
        self.kind = kind
        self.name = name
        self.expr = expr


class AssignmentStatement(Statement):
    def __init__(self, name, expr):
        self.name = name
        self.expr = expr


class MemberAssignment(Statement):
    def __init__(self, obj, member, expr):
        self.obj = obj
        self.member = member
        self.expr = expr


class ReturnStatement(Statement):
    def __init__(self, expr):
        self.expr = expr


class FunctionDefinition(Statement):
    def __init__(self, name, params, body, is_method=False):
        self.name = name
        self.params = params  # 参数名列表，方法可以 'self' 开头
        self.body = body
        self.is_method = is_method

    @property
    def takes_self(self):
        return self.is_method and bool(self.params) and self.params[0] == 'self'

    @property
    def arity(self):
        """调用时需要提供的实参数量（去掉开头的 self）"""
        return len(self.params) - (1 if self.takes_self else 0)


class FieldDeclaration(Statement):
    def __init__(self, kind, name, expr=None):
        self.kind = kind
        self.name = name
        self.expr = expr  # 可选初始化表达式


class ClassDefinition(Statement):
    def __init__(self, name, fields, methods, ctor=None):
        self.name = name
        self.fields = fields  # 按声明顺序的 FieldDeclaration 列表
        self.methods = methods  # 字典：方法名 -> FunctionDefinition
        self.ctor = ctor  # init 方法（可选）


# 运行时结构
class Binding:
    def __init__(self, value, kind=LET):
        self.value = value
        self.kind = kind

    @property
    def is_const(self):
        return self.kind == CONST

    def __repr__(self):
        return f'Binding({self.value!r}, {self.kind})'


class PayJarObject:
    def __init__(self, class_name, fields, methods):
        self.class_name = class_name
        self.fields = fields  # 字典：字段名 -> Binding，实例独有
        self.methods = methods  # 类定义中的方法表，按引用共享

    def __repr__(self):
        return f'<PayJarObject {self.class_name}>'


class ReturnValue:
    """包装返回值，用于区分正常执行结果和return语句"""

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f'ReturnValue({self.value!r})'


class OutputSink:
    """
    只追加的有序输出目标

    解释器不直接做任何宿主 I/O，println 的结果全部追加到这里。
    on_line 回调可让宿主边执行边展示输出。
    """

    def __init__(self, on_line=None):
        self._lines = []
        self._on_line = on_line

    def append(self, text):
        self._lines.append(text)
        if self._on_line is not None:
            self._on_line(text)

    @property
    def lines(self):
        return list(self._lines)

    def getvalue(self):
        return '\n'.join(self._lines)

    def __len__(self):
        return len(self._lines)
