"""Shell-style splitting of the free-form ``args`` input."""

import shlex
from typing import List


def tokenize(raw: str) -> List[str]:
    """
    Split an argument string into tokens.

    Whitespace separates tokens; single or double quotes group text that
    contains whitespace and are removed. Backslashes and '#' carry no
    special meaning, so Windows paths and URL fragments pass through.
    A quote that is never closed is dropped and the text after it is
    split on whitespace.

    Example:
        >>> tokenize('--release -i "python 3.9" --out dist')
        ['--release', '-i', 'python 3.9', '--out', 'dist']
        >>> tokenize('-i "python 3.9')
        ['-i', 'python', '3.9']
    """
    lexer = shlex.shlex(raw, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ""
    lexer.commenters = ""

    tokens = []
    try:
        for token in lexer:
            tokens.append(token)
    except ValueError:
        # Unclosed quote; lexer.token holds the text read since the last token
        tokens.extend(lexer.token.split())
    return tokens
