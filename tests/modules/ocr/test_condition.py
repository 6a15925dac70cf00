import pytest

from honk.modules.ocr.condition import ConditionSyntaxError, compile_condition, evaluate, parse_number


@pytest.mark.parametrize(
    "text, expr, expected",
    [
        ("Saved successfully", 'contains "saved"', True),
        ("Saved   successfully", 'equals "saved successfully"', True),
        ("Error", 'contains "saved"', False),
        ("", "empty", True),
        ("  ", "not empty", False),
        ("000289401", r'matches "^\d{9}$"', True),
        ("Items: 12", ">= 12", True),
        ("Items: 12", "< 12", False),
        ("1,250 coins", "> 1000", True),
        ("no digits", "> 0", False),
        ("Total 7", '> 5 and contains "total"', True),
        ("Total 3", '> 5 or contains "total"', True),
        ("Total 3", '> 5 and contains "total" or empty', False),
        ("ok", 'not contains "error"', True),
    ],
)
def test_evaluate(text, expr, expected):
    assert evaluate(text, expr) is expected


def test_and_binds_tighter_than_or():
    check = compile_condition('empty or contains "a" and contains "b"')
    assert check("")
    assert check("a b")
    assert not check("a")


@pytest.mark.parametrize(
    "text, expected",
    [("12", 12.0), ("1,024", 1024.0), ("-3.5 C", -3.5), ("lO", 10.0), ("abc", None), ("x7y", 7.0)],
)
def test_parse_number(text, expected):
    assert parse_number(text) == expected


@pytest.mark.parametrize(
    "expr",
    ["", "contains", "> abc", "bogus 3", 'contains "a" and', 'contains "a" xor empty', 'contains "unterminated'],
)
def test_syntax_errors(expr):
    with pytest.raises(ConditionSyntaxError):
        compile_condition(expr)
