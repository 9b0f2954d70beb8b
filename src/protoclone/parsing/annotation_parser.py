"""Parser for annotated property names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from protoclone.parsing.annotation_lexer import AnnotationLexer


@dataclass(frozen=True)
class Annotation:
    """Flags and bare name extracted from an annotated property name."""

    name: str
    flags: frozenset[str]


class AnnotationParser:
    """Parser for the ``(flag flag ...) name`` property-name grammar."""

    tokens = AnnotationLexer.tokens

    def __init__(self) -> None:
        self.lexer = AnnotationLexer()
        self.lexer.build(errorlog=yacc.NullLogger())
        self.parser: yacc.LRParser = None  # type: ignore

    def p_annotation(self, p: yacc.YaccProduction) -> None:
        """annotation : LPAREN flag_list RPAREN NAME"""
        p[0] = Annotation(name=p[4], flags=frozenset(p[2]))

    def p_flag_list_single(self, p: yacc.YaccProduction) -> None:
        """flag_list : flag"""
        p[0] = [p[1]]

    def p_flag_list_multiple(self, p: yacc.YaccProduction) -> None:
        """flag_list : flag_list flag"""
        p[0] = p[1] + [p[2]]

    def p_flag(self, p: yacc.YaccProduction) -> None:
        """flag : GET
                | SET
                | CONST
                | FINAL
                | HIDDEN
                | WRITABLE"""
        p[0] = p[1]

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (position {p.lexpos})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str) -> Annotation:
        """Parse an annotated name.

        Raises:
            SyntaxError: If ``data`` does not match the grammar.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False, errorlog=yacc.NullLogger())

        self.lexer.lexer.begin("INITIAL")
        result = self.parser.parse(data, lexer=self.lexer.lexer)
        if result is None:
            raise SyntaxError(f"Not an annotated name: {data!r}")
        return result
