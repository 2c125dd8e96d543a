import pytest

from record_normalizer.errors import MalformedRecord
from record_normalizer.tokenizer import tokenize


def test_plain_line_splits_into_eight_fields():
    assert tokenize("a,b,c,d,e,f,g,h") == ["a", "b", "c", "d", "e", "f", "g", "h"]


def test_quoted_delimiter_is_kept_inside_field():
    tokens = tokenize('1,"a,b",c,d,e,f,g,h')
    assert len(tokens) == 8
    assert tokens[1] == '"a,b"'


def test_trailing_delimiter_yields_empty_last_field():
    tokens = tokenize("a,b,c,d,e,f,g,")
    assert len(tokens) == 8
    assert tokens[7] == ""


def test_seven_parts_and_trailing_delimiter_after_whitespace():
    assert tokenize("a,b,c,d,e,f, ") == ["a", "b", "c", "d", "e", "f", " ", ""]


def test_trailing_empty_fields_are_dropped():
    assert tokenize("a,b,c,d,e,f,g,h,") == ["a", "b", "c", "d", "e", "f", "g", "h"]
    assert tokenize("a,b,c,d,e,f,g,h,,,") == ["a", "b", "c", "d", "e", "f", "g", "h"]


def test_empty_inner_fields_are_kept():
    assert tokenize(",,,,,,,h") == [""] * 7 + ["h"]


@pytest.mark.parametrize(
    "line",
    ["a,b,c", "a,b,c,d,e,f,g,h,i", "no delimiters here", "a,b,c,d,e,f,,", ",,,,,,,", "   ", ""],
)
def test_wrong_field_count_is_malformed(line):
    with pytest.raises(MalformedRecord) as excinfo:
        tokenize(line)
    assert excinfo.value.issue == "malformed_record"


def test_alternate_delimiter():
    assert tokenize('a;"b;c";d;e;f;g;h;i', delimiter=";")[1] == '"b;c"'
