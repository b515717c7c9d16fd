"""Translation of KQL filter expressions into search query DSL.

Supported syntax::

    field:value            field:"quoted phrase"     field:*
    field:(a or b)         field >= 10               free text
    not X                  X and Y                   X or Y        ( ... )

``not`` binds tighter than ``and``, which binds tighter than ``or``.
Keywords are case-insensitive when unquoted.
"""

from typing import Any, Dict, List, NamedTuple, Optional

from .exceptions import InvalidFilterError

Query = Dict[str, Any]

_SPECIAL_CHARS = set('()":<>')
_KEYWORDS = ("and", "or", "not")
_RANGE_OPERATORS = {"<": "lt", "<=": "lte", ">": "gt", ">=": "gte"}


class Token(NamedTuple):
    kind: str  # WORD, QUOTED, LPAREN, RPAREN, COLON, RANGE, EOF
    value: str
    position: int


def tokenize(expression: str) -> List[Token]:
    """Split a KQL expression into tokens."""
    tokens: List[Token] = []
    i = 0
    length = len(expression)
    while i < length:
        char = expression[i]
        if char.isspace():
            i += 1
        elif char == "(":
            tokens.append(Token("LPAREN", char, i))
            i += 1
        elif char == ")":
            tokens.append(Token("RPAREN", char, i))
            i += 1
        elif char == ":":
            tokens.append(Token("COLON", char, i))
            i += 1
        elif char in "<>":
            if i + 1 < length and expression[i + 1] == "=":
                tokens.append(Token("RANGE", char + "=", i))
                i += 2
            else:
                tokens.append(Token("RANGE", char, i))
                i += 1
        elif char == '"':
            start = i
            i += 1
            chars = []
            while i < length and expression[i] != '"':
                if expression[i] == "\\" and i + 1 < length:
                    i += 1
                chars.append(expression[i])
                i += 1
            if i >= length:
                raise InvalidFilterError("Unterminated quoted string", start)
            tokens.append(Token("QUOTED", "".join(chars), start))
            i += 1
        else:
            start = i
            chars = []
            while i < length and not expression[i].isspace() and expression[i] not in _SPECIAL_CHARS:
                if expression[i] == "\\" and i + 1 < length:
                    i += 1
                chars.append(expression[i])
                i += 1
            tokens.append(Token("WORD", "".join(chars), start))
    tokens.append(Token("EOF", "", length))
    return tokens


def _is_keyword(token: Token, keyword: str) -> bool:
    return token.kind == "WORD" and token.value.lower() == keyword


def _should(clauses: List[Query]) -> Query:
    return {"bool": {"should": clauses, "minimum_should_match": 1}}


class _Parser:
    """Recursive descent parser producing query DSL directly."""

    def __init__(self, expression: str) -> None:
        self.tokens = tokenize(expression)
        self.index = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, kind: str) -> Token:
        token = self.current
        if token.kind != kind:
            found = token.value or "end of input"
            raise InvalidFilterError(f"Expected {kind.lower()} but found '{found}'", token.position)
        return self.advance()

    def parse(self) -> Query:
        query = self.parse_or()
        if self.current.kind != "EOF":
            raise InvalidFilterError(f"Unexpected '{self.current.value}'", self.current.position)
        return query

    def parse_or(self) -> Query:
        clauses = [self.parse_and()]
        while _is_keyword(self.current, "or"):
            self.advance()
            clauses.append(self.parse_and())
        return clauses[0] if len(clauses) == 1 else _should(clauses)

    def parse_and(self) -> Query:
        clauses = [self.parse_not()]
        while _is_keyword(self.current, "and"):
            self.advance()
            clauses.append(self.parse_not())
        return clauses[0] if len(clauses) == 1 else {"bool": {"filter": clauses}}

    def parse_not(self) -> Query:
        if _is_keyword(self.current, "not"):
            self.advance()
            return {"bool": {"must_not": self.parse_not()}}
        return self.parse_primary()

    def parse_primary(self) -> Query:
        token = self.current
        if token.kind == "LPAREN":
            self.advance()
            query = self.parse_or()
            self.expect("RPAREN")
            return query
        if token.kind == "QUOTED":
            self.advance()
            return {"multi_match": {"type": "phrase", "query": token.value, "lenient": True}}
        if token.kind != "WORD" or token.value.lower() in _KEYWORDS:
            found = token.value or "end of input"
            raise InvalidFilterError(f"Expected a field or value but found '{found}'", token.position)

        self.advance()
        if self.current.kind == "COLON":
            self.advance()
            return self.parse_field_value(token.value)
        if self.current.kind == "RANGE":
            operator = self.advance().value
            bound = self.current
            if bound.kind not in ("WORD", "QUOTED"):
                raise InvalidFilterError("Expected a range value", bound.position)
            self.advance()
            return _should([{"range": {token.value: {_RANGE_OPERATORS[operator]: bound.value}}}])
        return {"multi_match": {"type": "best_fields", "query": token.value, "lenient": True}}

    def parse_field_value(self, field: str) -> Query:
        if self.current.kind == "LPAREN":
            self.advance()
            query = self.parse_value_or(field)
            self.expect("RPAREN")
            return query
        return self.parse_value(field)

    def parse_value_or(self, field: str) -> Query:
        clauses = [self.parse_value_and(field)]
        while _is_keyword(self.current, "or"):
            self.advance()
            clauses.append(self.parse_value_and(field))
        return clauses[0] if len(clauses) == 1 else _should(clauses)

    def parse_value_and(self, field: str) -> Query:
        clauses = [self.parse_value_not(field)]
        while _is_keyword(self.current, "and"):
            self.advance()
            clauses.append(self.parse_value_not(field))
        return clauses[0] if len(clauses) == 1 else {"bool": {"filter": clauses}}

    def parse_value_not(self, field: str) -> Query:
        if _is_keyword(self.current, "not"):
            self.advance()
            return {"bool": {"must_not": self.parse_value_not(field)}}
        if self.current.kind == "LPAREN":
            self.advance()
            query = self.parse_value_or(field)
            self.expect("RPAREN")
            return query
        return self.parse_value(field)

    def parse_value(self, field: str) -> Query:
        token = self.current
        if token.kind == "QUOTED":
            self.advance()
            return _should([{"match_phrase": {field: token.value}}])
        if token.kind != "WORD":
            found = token.value or "end of input"
            raise InvalidFilterError(f"Expected a value but found '{found}'", token.position)
        self.advance()
        if token.value == "*":
            return _should([{"exists": {"field": field}}])
        if "*" in token.value:
            return _should([{"query_string": {"fields": [field], "query": token.value}}])
        return _should([{"match": {field: token.value}}])


def kql_to_query(expression: Optional[str]) -> Optional[Query]:
    """Translate a KQL expression, returning None for an empty one."""
    if expression is None or not expression.strip():
        return None
    return _Parser(expression).parse()
