"""Compiler package for uriroute."""

from .tokens import *
from .variables import VariableSpec, VariableSpecParser, parse_variables
from .tokenizer import Tokenizer, tokenize
from .template import Template
from .pattern import Pattern
from .specificity import calculate_score, ranking_key

__all__ = [
    "TokenKind",
    "Literal",
    "Variable",
    "Wildcard",
    "Token",
    "VariableSpec",
    "VariableSpecParser",
    "parse_variables",
    "Tokenizer",
    "tokenize",
    "Template",
    "Pattern",
    "calculate_score",
    "ranking_key",
]
