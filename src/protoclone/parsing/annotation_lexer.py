"""Lexer for annotated property names such as ``(hidden get) name``."""

import ply.lex as lex


class AnnotationLexer:
    """Lexer for tokenizing the flag prefix of a property name."""

    # Flag keywords
    reserved = {
        "get": "GET",
        "set": "SET",
        "const": "CONST",
        "final": "FINAL",
        "hidden": "HIDDEN",
        "writable": "WRITABLE",
    }

    # Token list
    tokens = [
        "LPAREN",
        "RPAREN",
        "NAME",
    ] + list(reserved.values())

    # After the closing parenthesis the rest of the input is the bare name
    states = (("name", "exclusive"),)

    t_LPAREN = r"\("

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore

    # A flag takes the spaces after it; none may precede the first flag
    def t_FLAG(self, t: lex.LexToken) -> lex.LexToken:
        r"[A-Za-z_][A-Za-z0-9_]*[ ]*"
        t.value = t.value.rstrip(" ")
        flag_type = self.reserved.get(t.value)
        if flag_type is None:
            raise SyntaxError(f"Unknown annotation flag '{t.value}' at position {t.lexpos}")
        t.type = flag_type
        return t

    def t_RPAREN(self, t: lex.LexToken) -> lex.LexToken:
        r"\)[ ]+"
        t.value = ")"
        t.lexer.begin("name")
        return t

    def t_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character '{t.value[0]}' at position {t.lexpos}")

    # --- name state: everything up to the end of the line ---

    def t_name_NAME(self, t: lex.LexToken) -> lex.LexToken:
        r".+"
        return t

    def t_name_error(self, t: lex.LexToken) -> None:
        raise SyntaxError(f"Illegal character {t.value[0]!r} in name at position {t.lexpos}")

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize, starting from the initial state."""
        self.lexer.begin("INITIAL")
        self.lexer.input(data)

    def token(self) -> lex.LexToken | None:
        """Return the next token."""
        return self.lexer.token()

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens
