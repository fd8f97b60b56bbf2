"""
Tokenizer for SQL-shaped statements

Splits statement text into identifiers, keywords, ``$n`` placeholders,
literals, operators and punctuation. Tokenizing never fails: characters that
fit no pattern come back as OTHER tokens so the per-statement matchers can
simply fail to match and fall back.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class TokenType(Enum):
    KEYWORD = "KEYWORD"
    IDENTIFIER = "IDENTIFIER"
    PLACEHOLDER = "PLACEHOLDER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    OTHER = "OTHER"


# Only the words the translators branch on are keywords; everything else is
# an identifier, including reserved SQL words like NULL or NOW.
KEYWORDS = frozenset({
    'INSERT', 'INTO', 'VALUES', 'SELECT', 'FROM', 'WHERE', 'AND',
    'UPDATE', 'SET', 'DELETE', 'ORDER', 'LIMIT',
})


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str
    position: int

    def is_keyword(self, word: str) -> bool:
        return self.type is TokenType.KEYWORD and self.value == word

    def is_punct(self, char: str) -> bool:
        return self.type is TokenType.PUNCTUATION and self.value == char

    @property
    def placeholder_number(self) -> Optional[int]:
        """Digits of a ``$n`` placeholder as an int, None for other tokens"""
        if self.type is not TokenType.PLACEHOLDER:
            return None
        return int(self.value[1:])


# Order matters: first pattern that matches at the cursor wins
_PATTERNS = [
    ('WHITESPACE', r'\s+'),
    ('COMMENT', r'--[^\n]*|/\*.*?(?:\*/|$)'),
    ('STRING', r"'(?:[^']|'')*'"),
    ('QUOTED_IDENTIFIER', r'"((?:[^"]|"")+)"'),
    ('PLACEHOLDER', r'\$\d+'),
    ('NUMBER', r'\d+(?:\.\d+)?'),
    ('WORD', r'[A-Za-z_][A-Za-z0-9_]*'),
    ('OPERATOR', r'<>|!=|<=|>=|[=<>+\-*/|]'),
    ('PUNCTUATION', r'[(),;.]'),
]

_COMPILED = [(name, re.compile(pattern, re.DOTALL)) for name, pattern in _PATTERNS]


def tokenize(text: str) -> List[Token]:
    """
    Tokenize statement text.

    Keywords are uppercased; identifiers keep their original spelling.
    Double-quoted identifiers are unwrapped (``"userId"`` -> ``userId``).
    """
    tokens: List[Token] = []
    pos = 0
    length = len(text)

    while pos < length:
        for name, pattern in _COMPILED:
            match = pattern.match(text, pos)
            if not match:
                continue

            if name == 'WORD':
                word = match.group(0)
                if word.upper() in KEYWORDS:
                    tokens.append(Token(TokenType.KEYWORD, word.upper(), pos))
                else:
                    tokens.append(Token(TokenType.IDENTIFIER, word, pos))
            elif name == 'QUOTED_IDENTIFIER':
                tokens.append(Token(TokenType.IDENTIFIER, match.group(1).replace('""', '"'), pos))
            elif name in ('WHITESPACE', 'COMMENT'):
                pass
            else:
                tokens.append(Token(TokenType[name], match.group(0), pos))

            pos = match.end()
            break
        else:
            tokens.append(Token(TokenType.OTHER, text[pos], pos))
            pos += 1

    return tokens


def split_tokens(tokens: List[Token], separator) -> List[List[Token]]:
    """
    Split a token run on every token matching ``separator``.

    Empty runs are kept so fragment positions line up with the source
    (``a = $1 AND AND b = $2`` has three fragments, the middle one empty).
    """
    fragments: List[List[Token]] = [[]]
    for token in tokens:
        if separator(token):
            fragments.append([])
        else:
            fragments[-1].append(token)
    return fragments


def find_keyword(tokens: List[Token], word: str, start: int = 0) -> int:
    """Index of the first ``word`` keyword at or after ``start``, or -1"""
    for index in range(start, len(tokens)):
        if tokens[index].is_keyword(word):
            return index
    return -1
