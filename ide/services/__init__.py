"""
IDE Services 包
提供 PayJar 语言的验证、执行和代码安全检查功能
"""

# 语法验证
from ide.services.syntax_validator import (
    PayJarSyntaxValidator,
    SyntaxErrorInfo,
    validate_code
)

# 代码执行
from ide.services.execution_service import (
    PayJarExecutionService,
    get_execution_service,
    normalize_input
)

# 安全检查
from ide.services.code_service import (
    limit_request_size,
    validate_path,
    is_safe_filename
)

__all__ = [
    'PayJarSyntaxValidator',
    'SyntaxErrorInfo',
    'validate_code',
    'PayJarExecutionService',
    'get_execution_service',
    'normalize_input',
    'limit_request_size',
    'validate_path',
    'is_safe_filename',
]
