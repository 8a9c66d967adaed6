"""
Recursive-descent parser for GSX source files.

Phase 2 of the pipeline: build the GSX AST from the lexer's token stream.

The parser keeps one token of lookahead (current and peek). Embedded Go
code is captured as raw source through the lexer rather than being
tokenized and rebuilt. Errors are collected, never raised; after a
malformed top-level declaration the parser skips ahead to the next
declaration keyword and carries on.
"""

from __future__ import annotations

import logging

from ..errors import DiagnosticList, LexError
from ..gsx_ast.nodes import (
    Attribute,
    BodyNode,
    BoolLit,
    ChildrenSlot,
    Comment,
    CommentGroup,
    Component,
    ComponentCall,
    Element,
    File,
    FloatLit,
    ForLoop,
    GoCode,
    GoDecl,
    GoExpr,
    GoFunc,
    IfStmt,
    Import,
    IntLit,
    LetBinding,
    Param,
    StringLit,
    TextContent,
    group_comments,
)
from ..lexer.lexer import Lexer
from ..lexer.tokens import Position, Token, TokenType

logger = logging.getLogger(__name__)

# Go declaration keywords that are lexed as plain identifiers
DECL_KEYWORDS = ("type", "const", "var")

# Components declared with func must return this marker type
COMPONENT_RETURN_TYPE = "Element"

CHILDREN_SLOT_CODE = "children..."

_KEYWORD_TOKENS = frozenset(
    {
        TokenType.PACKAGE,
        TokenType.IMPORT,
        TokenType.FUNC,
        TokenType.RETURN,
        TokenType.IF,
        TokenType.ELSE,
        TokenType.FOR,
        TokenType.RANGE,
    }
)

# Tokens that are words in element text; consecutive words are space separated
_WORD_TOKENS = frozenset({TokenType.IDENT, TokenType.INT, TokenType.FLOAT}) | _KEYWORD_TOKENS

# Tokens that can appear in free text such as "Use j/k to scroll, q to quit"
_TEXT_TOKENS = _WORD_TOKENS | frozenset(
    {
        TokenType.COMMA,
        TokenType.SLASH,
        TokenType.DOT,
        TokenType.COLON,
        TokenType.SEMICOLON,
        TokenType.BANG,
        TokenType.MINUS,
        TokenType.PLUS,
        TokenType.STAR,
        TokenType.PIPE,
        TokenType.AMPERSAND,
        TokenType.EQUALS,
        TokenType.LPAREN,
        TokenType.RPAREN,
        TokenType.LBRACKET,
        TokenType.RBRACKET,
        TokenType.UNDERSCORE,
        TokenType.HASH,
        TokenType.PERCENT,
    }
)

# Punctuation followed by a space when a word comes next
_SPACED_PUNCTUATION = frozenset({TokenType.COMMA, TokenType.COLON, TokenType.SEMICOLON})

# Tokens that start a raw Go statement inside a body
_GO_STATEMENT_START = frozenset({TokenType.IDENT, TokenType.IF, TokenType.FOR, TokenType.FUNC, TokenType.RETURN})

_OPENERS = frozenset({TokenType.LPAREN, TokenType.LBRACKET, TokenType.LBRACE})
_CLOSERS = frozenset({TokenType.RPAREN, TokenType.RBRACKET, TokenType.RBRACE})

_COMMENTABLE = (Element, LetBinding, ForLoop, IfStmt, ComponentCall, GoCode, GoExpr, ChildrenSlot)


class Parser:
    """Parses .gsx source into a File AST."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.diagnostics = DiagnosticList()

        # Comments pulled from the lexer but not attached to a node yet
        self.pending_comments: list[Comment] = []

        self.peek: Token = lexer.next_token()
        self.current: Token = self.peek
        self._advance()

    # Token helpers

    def _advance(self) -> None:
        self.current = self.peek
        self.peek = self.lexer.next_token()

    def _skip_newlines(self) -> None:
        while self.current.type is TokenType.NEWLINE:
            self._advance()

    def _advance_skip_newlines(self) -> None:
        self._advance()
        self._skip_newlines()

    def _at(self, *token_types: TokenType) -> bool:
        return self.current.type in token_types

    def _at_decl_keyword(self) -> bool:
        return self.current.type is TokenType.IDENT and self.current.literal in DECL_KEYWORDS

    def _at_declaration_start(self) -> bool:
        if self._at(TokenType.AT_COMPONENT):
            return True
        # Top-level declarations start in the first column; "func" elsewhere is text or Go code
        return self.current.column == 1 and (self._at(TokenType.FUNC) or self._at_decl_keyword())

    def _at_content_end(self) -> bool:
        """Whether element content cannot continue: a closing tag, the enclosing '}' or a new declaration."""
        return self._at(TokenType.LANGLE_SLASH, TokenType.EOF, TokenType.RBRACE) or self._at_declaration_start()

    def _position(self) -> Position:
        return Position(self.lexer.filename, self.current.line, self.current.column)

    def _error(self, message: str, position: Position | None = None) -> None:
        self.diagnostics.add_error(position or self._position(), message)

    def _expect(self, token_type: TokenType) -> bool:
        if self.current.type is token_type:
            self._advance()
            return True
        self._error(f"expected {token_type}, got {self.current.type}")
        return False

    def _expect_skip_newlines(self, token_type: TokenType) -> bool:
        if not self._expect(token_type):
            return False
        self._skip_newlines()
        return True

    def _synchronize(self) -> None:
        """Skip tokens until the start of the next top-level declaration."""
        start = self.current
        while not self._at(TokenType.EOF):
            if self._at(TokenType.FUNC, TokenType.AT_COMPONENT) or self._at_decl_keyword():
                break
            self._advance()
        logger.debug("Recovered from %s at %s", start, self.current)

    # Comments

    def _collect_pending_comments(self) -> None:
        self.pending_comments.extend(self.lexer.consume_comments())

    def _leading_comment_group(self) -> CommentGroup | None:
        """Take every pending comment that precedes the current token."""
        self._collect_pending_comments()
        before = [c for c in self.pending_comments if c.offset < self.current.start_pos]
        if not before:
            return None
        self.pending_comments = [c for c in self.pending_comments if c.offset >= self.current.start_pos]
        return CommentGroup(before)

    def _trailing_comment_on_line(self, line: int) -> CommentGroup | None:
        """Take the first pending comment if it starts on the given line."""
        self._collect_pending_comments()
        if self.pending_comments and self.pending_comments[0].position.line == line:
            return CommentGroup([self.pending_comments.pop(0)])
        return None

    def _remaining_comment_groups(self) -> list[CommentGroup]:
        """Take the unclaimed comments before the current token, grouped by blank lines."""
        leading = self._leading_comment_group()
        if leading is None:
            return []
        return group_comments(leading.comments)

    # File level

    def parse_file(self) -> File | None:
        """
        Parse a complete .gsx file.

        Returns:
            The File node, or None when the package declaration is missing.
            All problems are recorded in self.diagnostics.
        """
        file = File(position=self._position())

        self._skip_newlines()
        file.leading_comments = self._leading_comment_group()

        file.package = self._parse_package()
        if not file.package:
            self.diagnostics.extend(self.lexer.diagnostics)
            return None

        self._skip_newlines()
        file.imports = self._parse_imports()
        self._skip_newlines()

        while not self._at(TokenType.EOF):
            self._skip_newlines()
            if self._at(TokenType.EOF):
                break

            leading = self._leading_comment_group()

            if self._at(TokenType.AT_COMPONENT):
                comp = self._parse_component()
                if comp is None:
                    self._synchronize()
                    continue
                comp.leading_comments = leading
                file.components.append(comp)
            elif self._at(TokenType.FUNC):
                result = self._parse_func_or_component()
                if result is None:
                    self._synchronize()
                    continue
                result.leading_comments = leading
                if isinstance(result, Component):
                    file.components.append(result)
                else:
                    file.funcs.append(result)
            elif self._at_decl_keyword():
                decl = self._parse_go_decl()
                decl.leading_comments = leading
                file.decls.append(decl)
            else:
                self._error(f"unexpected token {self.current.type}, expected @component, func, type, const, or var")
                self._synchronize()

        file.orphan_comments = self._remaining_comment_groups()

        self.diagnostics.extend(self.lexer.diagnostics)
        logger.debug(
            "Parsed %s: %d components, %d funcs, %d decls, %d diagnostics",
            self.lexer.filename or "<source>",
            len(file.components),
            len(file.funcs),
            len(file.decls),
            len(self.diagnostics),
        )
        return file

    def _parse_package(self) -> str:
        if not self._at(TokenType.PACKAGE):
            self._error("expected 'package' declaration")
            return ""
        self._advance()

        if not self._at(TokenType.IDENT):
            self._error("expected package name")
            return ""
        name = self.current.literal
        self._advance_skip_newlines()
        return name

    def _parse_imports(self) -> list[Import]:
        """
        Parse import statements.

        Supports import "path", import alias "path" and grouped imports
        in parentheses.
        """
        imports = []
        while self._at(TokenType.IMPORT):
            self._advance()
            self._skip_newlines()

            if self._at(TokenType.LPAREN):
                self._advance()
                self._skip_newlines()
                while not self._at(TokenType.RPAREN, TokenType.EOF):
                    imp = self._parse_single_import()
                    if imp is None:
                        # Skip the bad line so the group can still close
                        self._advance()
                    else:
                        imports.append(imp)
                    self._skip_newlines()
                self._expect(TokenType.RPAREN)
            else:
                imp = self._parse_single_import()
                if imp is not None:
                    imports.append(imp)
            self._skip_newlines()
        return imports

    def _parse_single_import(self) -> Import | None:
        pos = self._position()
        alias = ""
        if self._at(TokenType.IDENT, TokenType.UNDERSCORE, TokenType.DOT):
            alias = self.current.literal
            self._advance()

        if not self._at(TokenType.STRING):
            self._error("expected import path string")
            return None

        path = self.current.literal
        line = self.current.line
        self._advance()
        return Import(alias=alias, path=path, position=pos, trailing_comments=self._trailing_comment_on_line(line))

    def _parse_component(self) -> Component | None:
        """Parse @component Name(params) { body }"""
        pos = self._position()
        self._advance()  # @component

        if not self._at(TokenType.IDENT):
            self._error("expected component name")
            return None
        name = self.current.literal
        self._advance()

        params = self._parse_param_list()
        if params is None:
            return None
        self._skip_newlines()

        comp = Component(name=name, params=params, position=pos)
        if not self._parse_block(comp):
            return None
        return comp

    def _parse_func_or_component(self) -> Component | GoFunc | None:
        """
        Parse a func declaration.

        A func whose return type is exactly Element is a component with a DSL
        body. Anything else, including methods, is captured verbatim.
        """
        pos = self._position()
        start = self.current.start_pos
        self._advance()  # func

        if self._at(TokenType.LPAREN):
            # Method receiver
            return self._capture_raw_go_func(start, pos)

        if not self._at(TokenType.IDENT):
            self._error("expected function name")
            return None
        name = self.current.literal
        self._advance()

        params = self._parse_param_list()
        if params is None:
            return None
        self._skip_newlines()

        return_type = ""
        if self._at(TokenType.IDENT):
            return_type = self.current.literal
            self._advance()
        self._skip_newlines()

        if return_type != COMPONENT_RETURN_TYPE:
            return self._capture_raw_go_func(start, pos)

        comp = Component(name=name, params=params, position=pos)
        if not self._parse_block(comp):
            return None
        return comp

    def _capture_raw_go_func(self, start: int, pos: Position) -> GoFunc:
        """Capture a function as raw source up to its matching closing brace."""
        depth = 0
        started = False
        while not self._at(TokenType.EOF):
            if self._at(TokenType.LBRACE):
                depth += 1
                started = True
            elif self._at(TokenType.RBRACE):
                depth -= 1
                if started and depth == 0:
                    code = self.lexer.source_range(start, self.current.start_pos + 1)
                    self._advance_skip_newlines()
                    return GoFunc(code=code, position=pos)
            self._advance()

        self._error("unterminated function definition", pos)
        return GoFunc(code=self.lexer.source_range(start, self.lexer.source_pos), position=pos)

    def _parse_go_decl(self) -> GoDecl:
        """Capture a type, const or var declaration as raw source."""
        pos = self._position()
        start = self.current.start_pos
        kind = self.current.literal

        brace_depth = 0
        paren_depth = 0
        while not self._at(TokenType.EOF):
            tok = self.current
            if tok.type is TokenType.LBRACE:
                brace_depth += 1
            elif tok.type is TokenType.LPAREN:
                paren_depth += 1
            elif tok.type in (TokenType.RBRACE, TokenType.RPAREN):
                if tok.type is TokenType.RBRACE:
                    brace_depth -= 1
                else:
                    paren_depth -= 1
                if brace_depth == 0 and paren_depth == 0:
                    code = self.lexer.source_range(start, tok.start_pos + 1)
                    self._advance_skip_newlines()
                    return GoDecl(kind=kind, code=code, position=pos)
            elif tok.type is TokenType.NEWLINE and brace_depth == 0 and paren_depth == 0:
                code = self.lexer.source_range(start, tok.start_pos)
                self._skip_newlines()
                return GoDecl(kind=kind, code=code, position=pos)
            self._advance()

        return GoDecl(kind=kind, code=self.lexer.source_range(start, self.lexer.source_pos), position=pos)

    def _parse_param_list(self) -> list[Param] | None:
        """Parse (name Type, ...). Returns None if the parentheses are malformed."""
        if not self._expect(TokenType.LPAREN):
            return None

        params = []
        while not self._at(TokenType.RPAREN, TokenType.EOF):
            param = self._parse_param()
            if param is not None:
                params.append(param)
            if self._at(TokenType.COMMA):
                self._advance()
                self._skip_newlines()
            else:
                break

        if not self._expect(TokenType.RPAREN):
            return None
        return params

    def _parse_param(self) -> Param | None:
        pos = self._position()
        if not self._at(TokenType.IDENT):
            self._error("expected parameter name")
            return None
        name = self.current.literal
        self._advance()

        type_text = self._parse_type()
        if not type_text:
            return None
        return Param(name=name, type=type_text, position=pos)

    def _parse_type(self) -> str:
        """Capture a Go type as raw source up to a comma or ')' at depth zero."""
        start = self.current.start_pos
        depth = 0
        while not self._at(TokenType.EOF):
            if self._at(TokenType.COMMA, TokenType.RPAREN) and depth == 0:
                return self.lexer.source_range(start, self.current.start_pos).strip()
            if self._at(*_OPENERS):
                depth += 1
            elif self._at(*_CLOSERS):
                depth -= 1
            self._advance()
        return self.lexer.source_range(start, self.lexer.source_pos).strip()

    # Bodies

    def _parse_block(self, node: Component | ForLoop) -> bool:
        """Parse { body } into node.body, attaching trailing and orphan comments."""
        open_line = self.current.line
        if not self._expect(TokenType.LBRACE):
            return False
        node.trailing_comments = self._trailing_comment_on_line(open_line)

        self._skip_newlines()
        node.body, node.orphan_comments = self._parse_body()
        return self._expect_skip_newlines(TokenType.RBRACE)

    def _parse_body(self) -> tuple[list[BodyNode], list[CommentGroup]]:
        """Parse body nodes up to the closing brace. Returns the nodes and orphan comments."""
        nodes: list[BodyNode] = []
        orphans: list[CommentGroup] = []

        while not self._at(TokenType.RBRACE, TokenType.EOF):
            self._skip_newlines()
            # An unclosed body ends where the next declaration begins
            if self._at(TokenType.RBRACE, TokenType.EOF) or self._at_declaration_start():
                break

            leading = self._leading_comment_group()
            node = self._parse_body_node()
            if node is not None:
                self._attach_leading_comments(node, leading)
                nodes.append(node)
            elif leading is not None:
                orphans.append(leading)

        orphans.extend(self._remaining_comment_groups())
        return nodes, orphans

    @staticmethod
    def _attach_leading_comments(node: BodyNode, comments: CommentGroup | None) -> None:
        if comments is not None and isinstance(node, _COMMENTABLE):
            node.leading_comments = comments

    def _parse_body_node(self) -> BodyNode | None:
        tok = self.current.type
        if tok is TokenType.LANGLE:
            return self._parse_element()
        if tok is TokenType.AT_LET:
            return self._parse_let()
        if tok is TokenType.AT_FOR:
            return self._parse_for()
        if tok is TokenType.AT_IF:
            return self._parse_if()
        if tok is TokenType.AT_CALL:
            return self._parse_component_call()
        if tok is TokenType.LBRACE:
            return self._parse_go_expr_or_children_slot()
        if tok in _GO_STATEMENT_START:
            return self._parse_go_statement()

        self._error(f"unexpected token {tok} in body")
        self._advance()
        return None

    def _parse_go_statement(self) -> GoCode:
        """
        Capture a raw Go statement up to a newline or ';' at bracket depth zero.

        Semicolons inside a for-loop header do not end the statement.
        """
        pos = self._position()
        start = self.current.start_pos

        is_for = self._at(TokenType.FOR)
        in_for_header = is_for
        depth = 0

        while not self._at(TokenType.EOF):
            tok = self.current
            if tok.type in _OPENERS:
                if tok.type is TokenType.LBRACE and is_for:
                    in_for_header = False
                depth += 1
            elif tok.type in _CLOSERS:
                depth -= 1
            elif tok.type is TokenType.NEWLINE and depth == 0:
                code = self.lexer.source_range(start, tok.start_pos).strip()
                self._advance()
                return GoCode(code=code, position=pos)
            elif tok.type is TokenType.SEMICOLON and depth == 0 and not in_for_header:
                code = self.lexer.source_range(start, tok.start_pos).strip()
                self._advance()
                return GoCode(code=code, position=pos)
            self._advance()

        return GoCode(code=self.lexer.source_range(start, self.lexer.source_pos).strip(), position=pos)

    # Elements

    def _parse_element(self) -> Element | None:
        pos = self._position()
        self._advance()  # <

        if not self._at(TokenType.IDENT):
            self._error("expected element tag name")
            return None

        elem = Element(tag=self.current.literal, position=pos)
        self._advance()

        if self._at(TokenType.HASH):
            self._advance()
            if not self._at(TokenType.IDENT):
                self._error("expected identifier after '#' for named ref")
                return None
            elem.named_ref = self.current.literal
            self._advance()

        elem.attributes = self._parse_attributes()

        # key={expr} is the ref key, not a regular attribute
        for i, attr in enumerate(elem.attributes):
            if attr.name == "key" and isinstance(attr.value, GoExpr):
                elem.ref_key = attr.value
                del elem.attributes[i]
                break

        if self._at(TokenType.SLASH_ANGLE):
            elem.self_close = True
            close_line = self.current.line
            self._advance_skip_newlines()
            elem.trailing_comments = self._trailing_comment_on_line(close_line)
            return elem

        if not self._expect(TokenType.RANGLE):
            return None

        elem.children, elem.orphan_comments = self._parse_children()

        if not self._at(TokenType.LANGLE_SLASH):
            self._error(f"expected closing tag </{elem.tag}>")
            return elem
        self._advance()

        if not self._at(TokenType.IDENT) or self.current.literal != elem.tag:
            self._error(f"mismatched closing tag: expected </{elem.tag}>, got </{self.current.literal}>")
        if self._at(TokenType.IDENT):
            self._advance()

        close_line = self.current.line
        if not self._expect(TokenType.RANGLE):
            return elem
        elem.trailing_comments = self._trailing_comment_on_line(close_line)

        self._skip_newlines()
        return elem

    def _parse_attributes(self) -> list[Attribute]:
        attrs = []
        while True:
            # Attributes may span several lines
            self._skip_newlines()
            if not self._at(TokenType.IDENT):
                return attrs
            attr = self._parse_attribute()
            if attr is not None:
                attrs.append(attr)

    def _parse_attribute(self) -> Attribute | None:
        """Parse name, name=literal, name=ident or name={expr}."""
        pos = self._position()
        name = self.current.literal
        self._advance()

        if not self._at(TokenType.EQUALS):
            # Bare name is shorthand for true
            return Attribute(name=name, value=BoolLit(True, pos), position=pos, value_position=pos)
        self._advance()

        tok = self.current
        value_pos = self._position()
        if tok.type is TokenType.STRING:
            value = StringLit(tok.literal, value_pos)
            # Point inside the opening quote
            value_pos = value_pos.shifted(1)
            self._advance()
        elif tok.type is TokenType.INT:
            value = IntLit(int(tok.literal), value_pos)
            self._advance()
        elif tok.type is TokenType.FLOAT:
            value = self._float_literal(tok, value_pos)
            self._advance()
        elif tok.type is TokenType.LBRACE:
            value = self._parse_go_expr_node()
            if value is None:
                return None
        elif tok.type is TokenType.IDENT:
            if tok.literal in ("true", "false"):
                value = BoolLit(tok.literal == "true", value_pos)
            else:
                value = GoExpr(code=tok.literal, position=value_pos)
            self._advance()
        else:
            self._error(f"expected attribute value, got {tok.type}")
            return None

        return Attribute(name=name, value=value, position=pos, value_position=value_pos)

    def _float_literal(self, tok: Token, pos: Position) -> FloatLit:
        try:
            return FloatLit(float(tok.literal), pos)
        except ValueError:
            self._error(f"invalid float literal {tok.literal}")
            return FloatLit(0.0, pos)

    def _parse_children(self) -> tuple[list[BodyNode], list[CommentGroup]]:
        """Parse element content up to the closing tag. Returns the children and orphan comments."""
        children: list[BodyNode] = []
        orphans: list[CommentGroup] = []

        while True:
            self._skip_newlines()
            if self._at_content_end():
                break

            leading = self._leading_comment_group()
            tok = self.current.type

            child: BodyNode | None = None
            if tok is TokenType.LANGLE:
                child = self._parse_element()
            elif tok is TokenType.LBRACE:
                child = self._parse_go_expr_or_children_slot()
            elif tok is TokenType.AT_LET:
                child = self._parse_let()
            elif tok is TokenType.AT_FOR:
                child = self._parse_for()
            elif tok is TokenType.AT_IF:
                child = self._parse_if()
            elif tok is TokenType.AT_CALL:
                child = self._parse_component_call()
            elif tok in _TEXT_TOKENS:
                child = self._parse_text()
            else:
                # Tokens with no meaning in content are dropped
                self._advance()

            if child is not None:
                self._attach_leading_comments(child, leading)
                children.append(child)
            elif leading is not None:
                orphans.append(leading)

        orphans.extend(self._remaining_comment_groups())
        return children, orphans

    def _parse_text(self) -> TextContent:
        """Coalesce consecutive text tokens, spacing words apart."""
        pos = self._position()
        parts: list[str] = []
        prev_was_word = False
        prev_wants_space = False

        while self._at(*_TEXT_TOKENS):
            is_word = self.current.type in _WORD_TOKENS
            if parts and is_word and (prev_was_word or prev_wants_space):
                parts.append(" ")
            parts.append(self.current.literal)
            prev_was_word = is_word
            prev_wants_space = self.current.type in _SPACED_PUNCTUATION
            self._advance()

        return TextContent(text="".join(parts), position=pos)

    # Embedded Go

    def _read_braces(self) -> str | None:
        """
        Read the raw text of the {...} starting at the current token.

        The lexer has already produced the token after '{', so it is rewound
        to the brace and the two lookahead tokens are refilled afterwards.
        """
        pos = self._position()
        brace_pos = self.current.start_pos
        try:
            code = self.lexer.read_balanced_braces_from(brace_pos)
        except LexError as e:
            self._error(e.message, pos)
            self._advance()
            return None

        # Comments inside the braces are part of the expression text
        end = self.lexer.source_pos
        self.pending_comments = [c for c in self.pending_comments if not brace_pos < c.offset < end]

        self.current = self.lexer.next_token()
        self.peek = self.lexer.next_token()
        return code

    def _parse_go_expr_node(self) -> GoExpr | None:
        pos = self._position()
        code = self._read_braces()
        if code is None:
            return None
        return GoExpr(code=code.strip(), position=pos)

    def _parse_go_expr_or_children_slot(self) -> GoExpr | ChildrenSlot | None:
        pos = self._position()
        code = self._read_braces()
        if code is None:
            return None
        code = code.strip()
        if code == CHILDREN_SLOT_CODE:
            return ChildrenSlot(position=pos)
        return GoExpr(code=code, position=pos)

    # Directives

    def _parse_let(self) -> LetBinding | None:
        """Parse @let name = <element>"""
        pos = self._position()
        self._advance()  # @let

        if not self._at(TokenType.IDENT):
            self._error("expected variable name after @let")
            return None
        name = self.current.literal
        self._advance()

        if not self._expect(TokenType.EQUALS):
            return None
        self._skip_newlines()

        if not self._at(TokenType.LANGLE):
            self._error("expected element after @let =")
            return None

        elem = self._parse_element()
        if elem is None:
            return None
        return LetBinding(name=name, element=elem, position=pos)

    def _parse_loop_var(self, message: str) -> str | None:
        if self._at(TokenType.UNDERSCORE, TokenType.IDENT):
            name = self.current.literal
            self._advance()
            return name
        self._error(message)
        return None

    def _parse_raw_until_brace(self) -> str:
        """Capture raw source from the current token up to '{' or end of line."""
        start = self.current.start_pos
        while not self._at(TokenType.LBRACE, TokenType.EOF, TokenType.NEWLINE):
            self._advance()
        return self.lexer.source_range(start, self.current.start_pos).strip()

    def _parse_for(self) -> ForLoop | None:
        """Parse @for [index,] value := range iterable { body }"""
        loop = ForLoop(position=self._position())
        self._advance()  # @for

        first = self._parse_loop_var("expected loop variable")
        if first is None:
            return None

        if self._at(TokenType.COMMA):
            self._advance()
            second = self._parse_loop_var("expected second loop variable")
            if second is None:
                return None
            loop.index, loop.value = first, second
        else:
            loop.value = first

        if not self._expect(TokenType.COLON_EQUALS):
            return None

        if not self._at(TokenType.RANGE):
            self._error("expected 'range'")
            return None
        self._advance()

        loop.iterable = self._parse_raw_until_brace()
        self._skip_newlines()

        if not self._parse_block(loop):
            return None
        return loop

    def _parse_if(self) -> IfStmt | None:
        """Parse @if cond { } with optional @else { } or @else @if chains."""
        stmt = IfStmt(position=self._position())
        self._advance()  # @if

        stmt.condition = self._parse_raw_until_brace()
        self._skip_newlines()

        open_line = self.current.line
        if not self._expect(TokenType.LBRACE):
            return None
        stmt.trailing_comments = self._trailing_comment_on_line(open_line)

        self._skip_newlines()
        stmt.then, stmt.orphan_comments = self._parse_body()
        if not self._expect_skip_newlines(TokenType.RBRACE):
            return None

        if not self._at(TokenType.AT_ELSE):
            return stmt
        self._advance()
        self._skip_newlines()

        if self._at(TokenType.AT_IF):
            else_if = self._parse_if()
            if else_if is not None:
                stmt.else_ = [else_if]
            return stmt

        if not self._expect(TokenType.LBRACE):
            return stmt
        self._skip_newlines()
        stmt.else_, else_orphans = self._parse_body()
        stmt.orphan_comments.extend(else_orphans)
        self._expect_skip_newlines(TokenType.RBRACE)
        return stmt

    def _parse_component_call(self) -> ComponentCall | None:
        """Parse @Name(args) with an optional { children } block."""
        call = ComponentCall(name=self.current.literal, position=self._position())
        self._advance()

        if not self._expect(TokenType.LPAREN):
            return None

        # Arguments are raw source up to the matching ')'
        start = self.current.start_pos
        depth = 1
        while not self._at(TokenType.EOF):
            if self._at(TokenType.LPAREN):
                depth += 1
            elif self._at(TokenType.RPAREN):
                depth -= 1
                if depth == 0:
                    break
            self._advance()
        call.args = self.lexer.source_range(start, self.current.start_pos).strip()

        if not self._expect(TokenType.RPAREN):
            return None
        self._skip_newlines()

        if self._at(TokenType.LBRACE):
            self._advance()
            self._skip_newlines()
            call.children, call.orphan_comments = self._parse_body()
            if not self._expect_skip_newlines(TokenType.RBRACE):
                return None

        return call
