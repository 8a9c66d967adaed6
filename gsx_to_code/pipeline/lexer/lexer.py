"""
Lexer for GSX source files.

Phase 1 of the pipeline: turn raw source text into tokens, one at a time.

Comments are never emitted as tokens. They are buffered on the side and
the parser drains the buffer with consume_comments() when it is ready to
attach them to a node. Embedded Go expressions are not tokenized: the
parser asks the lexer to extract their raw text with read_go_expr() or
read_balanced_braces_from().
"""

from __future__ import annotations

from ..errors import DiagnosticList, LexError
from ..gsx_ast.nodes import Comment
from .tokens import DIRECTIVES, SINGLE_CHAR_TOKENS, Position, Token, TokenType, lookup_ident

EOF_CHAR = ""

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", '"': '"', "0": "\0"}
_RUNE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "\\": "\\", "'": "'", "0": "\0"}


def is_letter(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def is_digit(ch: str) -> bool:
    return ch.isdecimal()


class Lexer:
    """Tokenizes .gsx source text."""

    def __init__(self, filename: str, source: str):
        """
        Initialize the lexer.

        Args:
            filename: Name used in token positions and diagnostics
            source: Full source text
        """
        self.filename = filename
        self.source = source

        self.pos = 0  # offset of the current character
        self.read_pos = 0  # offset of the next character to read
        self.ch = EOF_CHAR
        self.line = 1
        self.column = 0

        # Start of the token being built
        self.token_line = 0
        self.token_column = 0
        self.token_start_pos = 0

        # Comments collected since the last consume_comments() call
        self.pending_comments: list[Comment] = []

        # End line of the last collected comment. Survives consume_comments()
        # so blank lines between comment batches are still detected.
        self.last_comment_end_line = 0

        self.diagnostics = DiagnosticList()

        self._read_char()

    # Cursor

    def _read_char(self) -> None:
        prev_was_newline = self.ch == "\n"
        if self.read_pos >= len(self.source):
            self.ch = EOF_CHAR
            self.pos = self.read_pos
        else:
            self.ch = self.source[self.read_pos]
            self.pos = self.read_pos
            self.read_pos += 1

        if prev_was_newline:
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def _peek_char(self) -> str:
        if self.read_pos >= len(self.source):
            return EOF_CHAR
        return self.source[self.read_pos]

    def _start_token(self) -> None:
        self.token_line = self.line
        self.token_column = self.column
        self.token_start_pos = self.pos

    def _make_token(self, token_type: TokenType, literal: str) -> Token:
        # Code between two comments means they are not separated by a blank line
        if token_type not in (TokenType.NEWLINE, TokenType.EOF):
            self.last_comment_end_line = 0
        return Token(token_type, literal, self.token_line, self.token_column, self.token_start_pos)

    def _position(self) -> Position:
        return Position(self.filename, self.token_line, self.token_column)

    def _error(self, message: str, token_type: TokenType = TokenType.ERROR, literal: str = "") -> Token:
        self.diagnostics.add_error(self._position(), message)
        return self._make_token(token_type, literal)

    @property
    def source_pos(self) -> int:
        """Current offset in the source, used to mark raw capture starts."""
        return self.pos

    def source_range(self, start: int, end: int) -> str:
        """Return source[start:end] with both ends clamped to the source."""
        start = max(start, 0)
        end = min(end, len(self.source))
        if start >= end:
            return ""
        return self.source[start:end]

    # Tokens

    def next_token(self) -> Token:
        """Return the next token from the source."""
        self._skip_whitespace_and_collect_comments()
        self._start_token()

        ch = self.ch
        if ch == EOF_CHAR:
            return self._make_token(TokenType.EOF, "")

        if ch == "\n":
            self._read_char()
            return self._make_token(TokenType.NEWLINE, "\n")

        if ch == "<":
            if self._peek_char() == "/":
                self._read_char()
                self._read_char()
                return self._make_token(TokenType.LANGLE_SLASH, "</")
            self._read_char()
            return self._make_token(TokenType.LANGLE, "<")

        if ch == "/":
            if self._peek_char() == ">":
                self._read_char()
                self._read_char()
                return self._make_token(TokenType.SLASH_ANGLE, "/>")
            self._read_char()
            return self._make_token(TokenType.SLASH, "/")

        if ch == ".":
            # .5 is a float
            if is_digit(self._peek_char()):
                return self._read_number()
            self._read_char()
            return self._make_token(TokenType.DOT, ".")

        if ch == ":":
            if self._peek_char() == "=":
                self._read_char()
                self._read_char()
                return self._make_token(TokenType.COLON_EQUALS, ":=")
            self._read_char()
            return self._make_token(TokenType.COLON, ":")

        if ch == "_":
            peek = self._peek_char()
            if is_letter(peek) or is_digit(peek):
                return self._read_identifier()
            self._read_char()
            return self._make_token(TokenType.UNDERSCORE, "_")

        if ch == "@":
            return self._read_at_keyword()
        if ch == '"':
            return self._read_string()
        if ch == "'":
            return self._read_rune()
        if ch == "`":
            return self._read_raw_string()

        token_type = SINGLE_CHAR_TOKENS.get(ch)
        if token_type is not None:
            self._read_char()
            return self._make_token(token_type, ch)

        if is_letter(ch):
            return self._read_identifier()
        if is_digit(ch):
            return self._read_number()

        self._read_char()
        return self._error(f"unexpected character {ch!r}", literal=ch)

    def tokenize(self) -> list[Token]:
        """Lex the whole source, EOF token included."""
        tokens = []
        while True:
            tok = self.next_token()
            tokens.append(tok)
            if tok.type is TokenType.EOF:
                return tokens

    def _read_identifier(self) -> Token:
        start = self.pos
        while is_letter(self.ch) or is_digit(self.ch):
            self._read_char()
        literal = self.source[start : self.pos]
        return self._make_token(lookup_ident(literal), literal)

    def _read_at_keyword(self) -> Token:
        self._read_char()  # @
        start = self.pos
        if is_letter(self.ch):
            while is_letter(self.ch) or is_digit(self.ch):
                self._read_char()
        keyword = self.source[start : self.pos]

        token_type = DIRECTIVES.get(keyword)
        if token_type is not None:
            return self._make_token(token_type, "@" + keyword)

        # @Name is a component call
        if keyword and keyword[0].isupper():
            return self._make_token(TokenType.AT_CALL, keyword)

        return self._error(f"unknown @ keyword: @{keyword}", literal="@" + keyword)

    def _read_string(self) -> Token:
        self._read_char()  # opening "
        result = []
        while self.ch != '"' and self.ch != EOF_CHAR:
            if self.ch == "\n":
                return self._error("unterminated string literal", literal="".join(result))
            if self.ch == "\\":
                self._read_char()
                if self.ch in _ESCAPES:
                    result.append(_ESCAPES[self.ch])
                else:
                    # Unknown escapes are kept verbatim
                    result.append("\\" + self.ch)
            else:
                result.append(self.ch)
            self._read_char()

        if self.ch == EOF_CHAR:
            return self._error("unterminated string literal", literal="".join(result))

        self._read_char()  # closing "
        return self._make_token(TokenType.STRING, "".join(result))

    def _read_rune(self) -> Token:
        self._read_char()  # opening '
        if self.ch == "\\":
            self._read_char()
            value = _RUNE_ESCAPES.get(self.ch, self.ch)
            self._read_char()
        elif self.ch == "'" or self.ch == EOF_CHAR:
            if self.ch == "'":
                self._read_char()
            return self._error("empty rune literal")
        else:
            value = self.ch
            self._read_char()

        if self.ch != "'":
            return self._error("unterminated rune literal", literal=value)

        self._read_char()  # closing '
        return self._make_token(TokenType.RUNE, value)

    def _read_raw_string(self) -> Token:
        self._read_char()  # opening `
        start = self.pos
        while self.ch != "`" and self.ch != EOF_CHAR:
            self._read_char()

        if self.ch == EOF_CHAR:
            return self._error("unterminated raw string literal", literal=self.source[start : self.pos])

        literal = self.source[start : self.pos]
        self._read_char()  # closing `
        return self._make_token(TokenType.RAW_STRING, literal)

    def _read_number(self) -> Token:
        start = self.pos
        is_float = False

        if self.ch == ".":
            is_float = True
            self._read_char()

        while is_digit(self.ch):
            self._read_char()

        if self.ch == "." and not is_float:
            is_float = True
            self._read_char()
            while is_digit(self.ch):
                self._read_char()

        if self.ch in ("e", "E"):
            is_float = True
            self._read_char()
            if self.ch in ("+", "-"):
                self._read_char()
            while is_digit(self.ch):
                self._read_char()

        literal = self.source[start : self.pos]
        return self._make_token(TokenType.FLOAT if is_float else TokenType.INT, literal)

    # Comments

    def _skip_whitespace_and_collect_comments(self) -> None:
        while True:
            if self.ch in (" ", "\t", "\r"):
                self._read_char()
            elif self.ch == "/" and self._peek_char() == "/":
                self._collect_line_comment()
            elif self.ch == "/" and self._peek_char() == "*":
                self._collect_block_comment()
            else:
                return

    def _had_blank_line_before(self, current_line: int) -> bool:
        if self.pending_comments:
            return current_line > self.pending_comments[-1].end_line + 1
        if self.last_comment_end_line > 0:
            return current_line > self.last_comment_end_line + 1
        return False

    def _collect_line_comment(self) -> None:
        start, start_line, start_col = self.pos, self.line, self.column
        blank_line_before = self._had_blank_line_before(start_line)

        while self.ch != "\n" and self.ch != EOF_CHAR:
            self._read_char()

        self._add_comment(start, start_line, start_col, False, blank_line_before)

    def _collect_block_comment(self) -> None:
        start, start_line, start_col = self.pos, self.line, self.column
        blank_line_before = self._had_blank_line_before(start_line)

        self._read_char()  # /
        self._read_char()  # *
        while True:
            if self.ch == EOF_CHAR:
                self.diagnostics.add_error(Position(self.filename, start_line, start_col), "unterminated block comment")
                return
            if self.ch == "*" and self._peek_char() == "/":
                self._read_char()
                self._read_char()
                break
            self._read_char()

        self._add_comment(start, start_line, start_col, True, blank_line_before)

    def _add_comment(self, start: int, line: int, col: int, is_block: bool, blank_line_before: bool) -> None:
        comment = Comment(
            text=self.source[start : self.pos],
            position=Position(self.filename, line, col),
            end_line=self.line,
            end_col=self.column,
            is_block=is_block,
            blank_line_before=blank_line_before,
            offset=start,
        )
        self.pending_comments.append(comment)
        self.last_comment_end_line = self.line

    def consume_comments(self) -> list[Comment]:
        """Return and clear the pending comments."""
        comments = self.pending_comments
        self.pending_comments = []
        return comments

    # Embedded Go

    def read_go_expr(self) -> Token:
        """
        Read a Go expression up to its matching closing brace.

        The opening '{' must already have been consumed. String, raw string
        and rune literals are skipped so braces inside them do not count.

        Returns:
            A GO_EXPR token with the text between the braces, or an ERROR
            token if the braces never balance
        """
        self._start_token()
        start = self.pos
        brace_depth = 1
        paren_depth = 0
        bracket_depth = 0

        while brace_depth > 0 and self.ch != EOF_CHAR:
            ch = self.ch
            if ch == '"':
                self._skip_string_in_expr()
                continue
            if ch == "`":
                self._skip_raw_string_in_expr()
                continue
            if ch == "'":
                self._skip_rune_in_expr()
                continue
            if ch == "{":
                brace_depth += 1
            elif ch == "}":
                brace_depth -= 1
            elif ch == "(":
                paren_depth += 1
            elif ch == ")":
                paren_depth -= 1
            elif ch == "[":
                bracket_depth += 1
            elif ch == "]":
                bracket_depth -= 1

            if brace_depth > 0:
                self._read_char()

        if brace_depth != 0:
            return self._error("unterminated Go expression: unmatched '{'", literal=self.source[start : self.pos])

        if paren_depth != 0:
            self.diagnostics.add_error(self._position(), "unterminated Go expression: unmatched parentheses")
        if bracket_depth != 0:
            self.diagnostics.add_error(self._position(), "unterminated Go expression: unmatched brackets")

        expr = self.source[start : self.pos]
        self._read_char()  # closing }
        return self._make_token(TokenType.GO_EXPR, expr)

    def _skip_string_in_expr(self) -> None:
        self._read_char()
        while self.ch != '"' and self.ch != EOF_CHAR:
            if self.ch == "\\":
                self._read_char()
            self._read_char()
        if self.ch == '"':
            self._read_char()

    def _skip_raw_string_in_expr(self) -> None:
        self._read_char()
        while self.ch != "`" and self.ch != EOF_CHAR:
            self._read_char()
        if self.ch == "`":
            self._read_char()

    def _skip_rune_in_expr(self) -> None:
        self._read_char()
        if self.ch == "\\":
            self._read_char()
        self._read_char()
        if self.ch == "'":
            self._read_char()

    def read_balanced_braces_from(self, start: int) -> str:
        """
        Read balanced brace content starting at an explicit offset.

        Used by the parser when it already holds a '{' token (and has lexed
        one token past it) and needs the raw Go text inside the braces.

        Args:
            start: Offset of the opening '{'

        Returns:
            The text between the braces. The cursor is left just after the
            closing '}' with line and column recomputed.

        Raises:
            LexError: If start does not point at '{' or the braces never close
        """
        source = self.source
        if start < 0 or start >= len(source) or source[start] != "{":
            raise LexError(self._position(), "invalid start position for balanced braces")

        content_start = start + 1
        pos = content_start
        depth = 1
        while pos < len(source) and depth > 0:
            ch = source[pos]
            if ch == "{":
                depth += 1
                pos += 1
            elif ch == "}":
                depth -= 1
                if depth > 0:
                    pos += 1
            elif ch == '"':
                pos += 1
                while pos < len(source) and source[pos] != '"':
                    pos += 2 if source[pos] == "\\" and pos + 1 < len(source) else 1
                if pos < len(source):
                    pos += 1
            elif ch == "`":
                pos += 1
                while pos < len(source) and source[pos] != "`":
                    pos += 1
                if pos < len(source):
                    pos += 1
            elif ch == "'":
                pos += 1
                if pos < len(source) and source[pos] == "\\":
                    pos += 2
                elif pos < len(source):
                    pos += 1
                if pos < len(source) and source[pos] == "'":
                    pos += 1
            else:
                pos += 1

        if depth != 0:
            raise LexError(self._position(), "unterminated braces: unmatched '{'")

        content = source[content_start:pos]

        # Comments seen while lexing ahead into the expression belong to it
        self.pending_comments = [c for c in self.pending_comments if c.offset < start]

        # Park the cursor on the closing brace, then step past it
        self.ch = "}"
        self.pos = pos
        self.read_pos = pos + 1
        self.line = source.count("\n", 0, pos) + 1
        self.column = pos - (source.rfind("\n", 0, pos) + 1) + 1
        self._read_char()

        return content
