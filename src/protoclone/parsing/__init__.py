"""Parsing module for annotated property names."""

from protoclone.parsing.annotation_lexer import AnnotationLexer
from protoclone.parsing.annotation_parser import Annotation, AnnotationParser

__all__ = [
    "Annotation",
    "AnnotationLexer",
    "AnnotationParser",
]
