"""
PayJar 代码执行器模块

该模块负责执行解析后的 AST（抽象语法树），是解释器的第三阶段。
包含 PayJarEvaluator 类，用于评估表达式、执行语句、管理变量作用域，
以及处理函数调用、方法调用和对象构造。

执行分两遍：
1. 提升：把顶层的函数定义和类定义登记到全局函数表/类表（与书写顺序无关）
2. 执行：按源码顺序在全局作用域执行其余语句

return 不使用异常实现：每条语句返回 None（正常）或 ReturnValue（正在返回），
由最近的调用边界拦截并转换为调用结果。

每次运行创建一个新的 PayJarEvaluator，作用域、函数表、类表都是实例字段，
不存在进程级共享状态。
"""

import math
import logging

try:
    from payjar_runtime.models import *
    from payjar_runtime.errors import PayJarRuntimeError
except ImportError:
    from models import *
    from errors import PayJarRuntimeError

logger = logging.getLogger(__name__)


def is_number(value):
    # bool 是 int 的子类，但不是 PayJar 的值类型
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def value_kind(value):
    """返回值的种类名：Number / String / Object / Null"""
    if value is None:
        return 'Null'
    if is_number(value):
        return 'Number'
    if isinstance(value, str):
        return 'String'
    if isinstance(value, PayJarObject):
        return 'Object'
    return type(value).__name__


def stringify(value):
    """值的字符串形式，println 和模板插值共用"""
    if value is None:
        return 'null'
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, PayJarObject):
        fields = ', '.join(f'{name}={stringify(b.value)}' for name, b in value.fields.items())
        return f'<Object {value.class_name} ({fields})>'
    return str(value)


def _truncating_divide(left, right):
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


class PayJarEvaluator:
    def __init__(self, output=None, input_lines=None):
        self.output = output if output is not None else OutputSink()
        self.scopes = [{}]  # 栈底为全局作用域，永不弹出
        self.functions = {}  # 函数名 -> FunctionDefinition
        self.classes = {}  # 类名 -> ClassDefinition
        self.current_obj = None  # 正在执行的方法的接收者
        self.warnings = []
        self._input_lines = list(input_lines or [])
        self._input_pos = 0

    # --- 入口 ---

    def interpret(self, program):
        if not isinstance(program, Program):
            raise PayJarRuntimeError(
                f"Runtime Error: Unsupported AST type for interpretation: {type(program).__name__}"
            )

        # 第一遍：提升函数和类定义
        for stmt in program.body:
            if isinstance(stmt, FunctionDefinition):
                self.define_function(stmt)
            elif isinstance(stmt, ClassDefinition):
                self.define_class(stmt)
        logger.debug(f"提升完成：函数 {list(self.functions)}，类 {list(self.classes)}")

        # 第二遍：执行其余语句
        for stmt in program.body:
            if isinstance(stmt, (FunctionDefinition, ClassDefinition)):
                continue
            result = self.execute_statement(stmt)
            if isinstance(result, ReturnValue):
                warning = f"Warning: Return statement encountered in main body. Value: {stringify(result.value)}"
                logger.warning(warning)
                self.warnings.append(warning)

    # --- 作用域管理 ---

    @property
    def global_scope(self):
        return self.scopes[0]

    @property
    def current_scope(self):
        return self.scopes[-1]

    def push_scope(self):
        self.scopes.append({})

    def pop_scope(self):
        if len(self.scopes) <= 1:
            raise PayJarRuntimeError("Runtime Error: Cannot pop global scope.")
        self.scopes.pop()

    def _lookup_binding(self, name):
        for scope in reversed(self.scopes):
            if name in scope:
                return scope[name]
        return None

    def _lookup_variable(self, name):
        binding = self._lookup_binding(name)
        if binding is None:
            raise PayJarRuntimeError(f"Runtime Error: Undefined variable '{name}'")
        return binding.value

    def declare_variable(self, name, value, kind):
        """在最内层作用域声明变量；同一作用域内不允许重复声明"""
        if name in self.current_scope:
            raise PayJarRuntimeError(
                f"Runtime Error: Redeclaration of variable '{name}' is not allowed in this scope."
            )
        self.current_scope[name] = Binding(value, kind)

    def assign_variable(self, name, value):
        """从内到外查找第一个同名绑定并赋值"""
        binding = self._lookup_binding(name)
        if binding is None:
            raise PayJarRuntimeError(f"Runtime Error: Assignment to undefined variable '{name}'.")
        if binding.is_const:
            raise PayJarRuntimeError(f"Runtime Error: Cannot assign to a constant variable '{name}'.")
        binding.value = value

    def _bind_local(self, name, value):
        # 参数和 self 直接绑定到当前帧，不向外查找
        self.current_scope[name] = Binding(value, LET)

    # --- 定义 ---

    def define_function(self, func):
        # 函数体内的嵌套定义每次调用都会再次执行，同一节点不算重复定义
        if self.functions.get(func.name) is func:
            return
        if func.name in self.functions:
            raise PayJarRuntimeError(f"Runtime Error: Function '{func.name}' already defined globally.")
        self.functions[func.name] = func

    def define_class(self, class_def):
        if self.classes.get(class_def.name) is class_def:
            return
        if class_def.name in self.classes:
            raise PayJarRuntimeError(f"Runtime Error: Class '{class_def.name}' already defined.")
        self.classes[class_def.name] = class_def

    # --- 语句执行 ---

    def execute_block(self, statements):
        for stmt in statements:
            result = self.execute_statement(stmt)
            # 如果语句返回了ReturnValue，立即向上传播（终止执行）
            if isinstance(result, ReturnValue):
                return result
        return None

    def execute_statement(self, stmt):
        if isinstance(stmt, PrintStatement):
            self.print_value(self.evaluate_expression(stmt.expr))
        elif isinstance(stmt, VariableDeclaration):
            value = self.evaluate_expression(stmt.expr)
            self.declare_variable(stmt.name, value, stmt.kind)
        elif isinstance(stmt, AssignmentStatement):
            value = self.evaluate_expression(stmt.expr)
            self.assign_variable(stmt.name, value)
        elif isinstance(stmt, MemberAssignment):
            self._assign_member(stmt)
        elif isinstance(stmt, ReturnStatement):
            return ReturnValue(self.evaluate_expression(stmt.expr))
        elif isinstance(stmt, FunctionDefinition):
            self.define_function(stmt)
        elif isinstance(stmt, ClassDefinition):
            self.define_class(stmt)
        elif isinstance(stmt, FieldDeclaration):
            # 字段在对象构造时处理
            pass
        elif isinstance(stmt, Expression):
            # 表达式作为语句，结果丢弃
            self.evaluate_expression(stmt)
        else:
            raise PayJarRuntimeError(f"Runtime Error: Unknown AST node type: {type(stmt).__name__}")
        return None

    def evaluate_expression(self, expr):
        if isinstance(expr, Literal):
            return expr.value
        elif isinstance(expr, VariableAccess):
            return self._lookup_variable(expr.name)
        elif isinstance(expr, TemplateString):
            return self._eval_template(expr)
        elif isinstance(expr, BinaryOp):
            left = self.evaluate_expression(expr.left)
            right = self.evaluate_expression(expr.right)
            return self._eval_binary_op(left, expr.op, right)
        elif isinstance(expr, UnaryOp):
            return self._eval_unary_op(expr.op, self.evaluate_expression(expr.operand))
        elif isinstance(expr, FunctionCall):
            return self._call_function(expr)
        elif isinstance(expr, ObjectCreation):
            return self.instantiate_object(expr.class_name, expr.args)
        elif isinstance(expr, MemberAccess):
            return self._access_member(expr)
        elif isinstance(expr, ReadInput):
            self.evaluate_expression(expr.prompt)
            return self.read_line()
        else:
            raise PayJarRuntimeError(f"Runtime Error: Unknown AST node type: {type(expr).__name__}")

    def _eval_template(self, expr):
        result = ''
        for part in expr.parts:
            if isinstance(part, Literal):
                result += part.value
            elif isinstance(part, VariableAccess):
                result += stringify(self._lookup_variable(part.name))
            else:
                raise PayJarRuntimeError(
                    f"Runtime Error: Unexpected part in template string: {type(part).__name__}"
                )
        return result

    # --- 运算符 ---

    def _unsupported_operands(self, op, left, right):
        return PayJarRuntimeError(
            f"Runtime Error: Unsupported operand types for {op}: {value_kind(left)} and {value_kind(right)}."
        )

    def _eval_binary_op(self, left, op, right):
        # 加法需要特殊处理（字符串拼接 vs 数值相加）
        if op == '+':
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) or isinstance(right, str):
                return stringify(left) + stringify(right)
            raise self._unsupported_operands(op, left, right)

        if op in ('==', '!='):
            equal = self._values_equal(left, right)
            return int(equal if op == '==' else not equal)

        if op in ('<', '>', '<=', '>='):
            comparable = (is_number(left) and is_number(right)) or (
                isinstance(left, str) and isinstance(right, str))
            if not comparable:
                raise self._unsupported_operands(op, left, right)
            if op == '<':
                return int(left < right)
            if op == '>':
                return int(left > right)
            if op == '<=':
                return int(left <= right)
            return int(left >= right)

        # 其他算术运算符需要数值操作数
        if not (is_number(left) and is_number(right)):
            raise self._unsupported_operands(op, left, right)

        if op == '-':
            return left - right
        elif op == '*':
            return left * right
        elif op == '/':
            if right == 0:
                raise PayJarRuntimeError("Runtime Error: Division by zero.")
            if isinstance(left, int) and isinstance(right, int):
                return _truncating_divide(left, right)
            return left / right
        elif op == '%':
            if right == 0:
                raise PayJarRuntimeError("Runtime Error: Modulo by zero.")
            if isinstance(left, int) and isinstance(right, int):
                return left - right * _truncating_divide(left, right)
            return math.fmod(left, right)
        raise PayJarRuntimeError(f"Runtime Error: Unsupported binary operator: {op}")

    @staticmethod
    def _values_equal(left, right):
        if is_number(left) and is_number(right):
            return left == right
        if value_kind(left) != value_kind(right):
            return False
        if isinstance(left, PayJarObject):
            return left is right
        return left == right

    def _eval_unary_op(self, op, operand):
        if not is_number(operand):
            raise PayJarRuntimeError(f"Runtime Error: Unary operator {op} applied to non-numeric type.")
        if op == '+':
            return +operand
        if op == '-':
            return -operand
        raise PayJarRuntimeError(f"Runtime Error: Unsupported unary operator: {op}")

    # --- 函数与方法调用 ---

    def _call_function(self, expr):
        """统一函数调用逻辑：方法体内优先解析为当前接收者的方法"""
        if self.current_obj is not None and expr.name in self.current_obj.methods:
            return self._invoke(self.current_obj.methods[expr.name], expr.args, self.current_obj)
        if expr.name in self.functions:
            return self._invoke(self.functions[expr.name], expr.args, None)
        raise PayJarRuntimeError(f"Runtime Error: Call to undefined function or method '{expr.name}'")

    def _invoke(self, func, arg_exprs, receiver):
        """
        调用协议

        - 元数严格匹配（方法的首个 self 参数不计入）
        - 实参在调用者作用域中从左到右求值，之后才压入被调用者作用域
        - 方法先绑定 self，再绑定各参数
        - 无论正常结束、return 还是出错，压入的作用域都会弹出
        """
        if func.arity != len(arg_exprs):
            raise PayJarRuntimeError(
                f"Runtime Error: Function/Method '{func.name}' expected {func.arity} arguments "
                f"but got {len(arg_exprs)}"
            )

        args = [self.evaluate_expression(arg) for arg in arg_exprs]

        is_method = func.is_method and receiver is not None
        params = func.params[1:] if func.takes_self else func.params
        return self._run_body(func, params, args, receiver if is_method else None)

    def _run_body(self, func, params, args, receiver):
        prev_obj = self.current_obj
        self.current_obj = receiver
        self.push_scope()
        try:
            if receiver is not None:
                self._bind_local('self', receiver)
            for name, value in zip(params, args):
                self._bind_local(name, value)

            result = self.execute_block(func.body)
        finally:
            self.pop_scope()
            self.current_obj = prev_obj

        if isinstance(result, ReturnValue):
            return result.value
        return None

    # --- 对象 ---

    def instantiate_object(self, class_name, arg_exprs):
        """实例化对象并调用构造函数（如果存在）"""
        if class_name not in self.classes:
            raise PayJarRuntimeError(
                f"Runtime Error: Attempt to create instance of undefined class '{class_name}'"
            )
        class_def = self.classes[class_name]

        args = [self.evaluate_expression(arg) for arg in arg_exprs]

        # 字段初始化表达式在调用者作用域中求值
        fields = {}
        for field in class_def.fields:
            value = self.evaluate_expression(field.expr) if field.expr is not None else None
            fields[field.name] = Binding(value, field.kind)

        obj = PayJarObject(class_name, fields, class_def.methods)

        ctor = class_def.ctor
        if ctor is not None:
            if not ctor.params or ctor.params[0] != 'self':
                raise PayJarRuntimeError(
                    f"Runtime Error: Constructor 'init' for class '{class_name}' must have 'self' "
                    f"as its first parameter."
                )
            if len(ctor.params) - 1 != len(args):
                raise PayJarRuntimeError(
                    f"Runtime Error: Constructor for '{class_name}' expected {len(ctor.params) - 1} "
                    f"arguments but got {len(args)}"
                )
            # init 的返回值被丢弃
            self._run_body(ctor, ctor.params[1:], args, obj)

        return obj

    def _access_member(self, expr):
        obj = self.evaluate_expression(expr.obj)
        if not isinstance(obj, PayJarObject):
            raise PayJarRuntimeError(
                f"Runtime Error: Attempt to access member '{expr.member}' on a non-object type."
            )

        if expr.is_call:
            if expr.member not in obj.methods:
                raise PayJarRuntimeError(
                    f"Runtime Error: Method '{expr.member}' not found on object of type '{obj.class_name}'"
                )
            return self._invoke(obj.methods[expr.member], expr.args, obj)

        if expr.member not in obj.fields:
            raise PayJarRuntimeError(
                f"Runtime Error: Field '{expr.member}' not found on object of type '{obj.class_name}'"
            )
        return obj.fields[expr.member].value

    def _assign_member(self, stmt):
        obj = self.evaluate_expression(stmt.obj)
        if not isinstance(obj, PayJarObject):
            raise PayJarRuntimeError(
                f"Runtime Error: Attempt to assign member '{stmt.member}' on a non-object type."
            )
        value = self.evaluate_expression(stmt.expr)

        binding = obj.fields.get(stmt.member)
        if binding is None:
            raise PayJarRuntimeError(
                f"Runtime Error: Field '{stmt.member}' not found on object of type '{obj.class_name}' "
                f"for assignment."
            )
        if binding.is_const:
            raise PayJarRuntimeError(
                f"Runtime Error: Cannot assign to constant field '{stmt.member}' of object "
                f"'{obj.class_name}'."
            )
        binding.value = value

    # 内置操作
    def print_value(self, value):
        self.output.append(stringify(value))

    def read_line(self):
        """读取下一行输入，耗尽时返回空字符串"""
        if self._input_pos >= len(self._input_lines):
            return ''
        line = self._input_lines[self._input_pos]
        self._input_pos += 1
        return line
