import pytest

from minishell.tokens import (
    ShellSyntaxError,
    Token,
    TokenType,
    UnclosedQuoteError,
    check_syntax,
    is_quote,
    is_separator,
    is_space,
    tokenize,
)


def ident(value):
    return Token(TokenType.IDENTIFIER, value)


def test_simple_pipeline():
    assert tokenize("ls -l | wc") == [
        ident("ls"),
        ident("-l"),
        Token(TokenType.PIPE),
        ident("wc"),
    ]


@pytest.mark.parametrize(
    "text, kind",
    [
        ("<<", TokenType.DLESS),
        (">>", TokenType.DGREAT),
        ("<", TokenType.LESS),
        (">", TokenType.GREAT),
        ("(", TokenType.O_PARENT),
        (")", TokenType.C_PARENT),
        ("&&", TokenType.AND),
        ("||", TokenType.OR),
        ("|", TokenType.PIPE),
    ],
)
def test_operators(text, kind):
    assert tokenize(f"a{text}b") == [ident("a"), Token(kind), ident("b")]


def test_single_ampersand_stays_in_word():
    assert tokenize("a&b") == [ident("a&b")]


def test_operator_tokens_have_no_value():
    assert all(t.value is None for t in tokenize("< > | && ||"))


def test_quoted_word_keeps_quotes_and_separators():
    assert tokenize("echo 'a | b'") == [ident("echo"), ident("'a | b'")]


def test_double_quotes_then_pipe():
    assert tokenize('echo "a b"|x') == [
        ident("echo"),
        ident('"a b"'),
        Token(TokenType.PIPE),
        ident("x"),
    ]


def test_whitespace_is_skipped():
    assert tokenize("  \t ls   ") == [ident("ls")]


def test_empty_line():
    assert tokenize("") == []


def test_newline_does_not_break_word():
    assert tokenize("a\nb") == [ident("a\nb")]


@pytest.mark.parametrize("quote", ['"', "'"])
def test_unclosed_quote(quote):
    with pytest.raises(UnclosedQuoteError) as info:
        tokenize(f"echo {quote}abc")
    assert info.value.quote == quote
    assert info.value.exit_status == 258
    assert str(info.value).endswith(f"`{quote}'")


def test_is_quote():
    assert is_quote("'") and is_quote('"')
    assert not is_quote("a")
    assert not is_quote("")


def test_is_space():
    assert all(is_space(c) for c in "\t\n\v\f\r ")
    assert not is_space("x")
    assert not is_space("")


def test_is_separator():
    assert is_separator("&&x")
    assert is_separator("|")
    assert is_separator(" a")
    assert not is_separator("&x")
    assert not is_separator("\nabc")
    assert not is_separator("")


@pytest.mark.parametrize("line", ["cat |", "ls >", "ls >>", "cat <", "(ls)"])
def test_check_syntax_rejects_trailing_operator(line):
    with pytest.raises(ShellSyntaxError) as info:
        check_syntax(tokenize(line))
    assert info.value.token_type is TokenType.NL
    assert info.value.exit_status == 2
    assert "`newline'" in str(info.value)


@pytest.mark.parametrize("line", ["ls -l", "cat <<", "a && b", ""])
def test_check_syntax_accepts(line):
    tokens = tokenize(line)
    assert check_syntax(tokens) == tokens


@pytest.mark.parametrize(
    "kind, symbol",
    [
        (TokenType.AND, "&&"),
        (TokenType.DLESS, "<<"),
        (TokenType.OR, "||"),
        (TokenType.PIPE, "|"),
    ],
)
def test_symbols_tokenize_back_to_their_type(kind, symbol):
    assert kind.symbol == symbol
    assert tokenize(kind.symbol) == [Token(kind)]