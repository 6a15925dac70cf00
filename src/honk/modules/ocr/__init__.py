from .backend import PaddleTextBackend, TextAnalysisBackend, TextBackendError
from .condition import ConditionSyntaxError, compile_condition, evaluate, parse_number

__all__ = [
    "PaddleTextBackend",
    "TextAnalysisBackend",
    "TextBackendError",
    "ConditionSyntaxError",
    "compile_condition",
    "evaluate",
    "parse_number",
]
