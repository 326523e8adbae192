# Code Generation Package
# Dependency walk, codegen sink and cached compiler

from .compiler import CompileResult, MaterialCompiler, compile_material, get_compiler
from .context import GenerationContext
from .variable_table import VariableTable

__all__ = [
    'CompileResult', 'MaterialCompiler', 'compile_material', 'get_compiler',
    'GenerationContext', 'VariableTable',
]
