import pytest

from csv_parser import parse_csv, parse_csv_line
from errors import MalformedInputError
from models import ParsedTable


def test_parse_headers_and_rows_with_crlf():
    table = parse_csv("Name,Age\r\nAnn,30\r\nBob,41\n")
    assert table.headers == ("Name", "Age")
    assert table.rows == ({"Name": "Ann", "Age": "30"}, {"Name": "Bob", "Age": "41"})


def test_blank_lines_are_skipped():
    table = parse_csv("\nName,Age\n\n   \nAnn,30\n\n")
    assert len(table.rows) == 1


def test_header_only_is_rejected():
    with pytest.raises(MalformedInputError):
        parse_csv("h1,h2\n")


def test_empty_text_is_rejected():
    with pytest.raises(MalformedInputError):
        parse_csv("")


def test_quoted_commas_stay_in_field():
    table = parse_csv('name,city\n"Doe, John","Paris"\n')
    assert table.rows[0] == {"name": "Doe, John", "city": "Paris"}


def test_fields_are_trimmed():
    assert parse_csv_line(" a , b ,c ") == ["a", "b", "c"]


def test_short_row_is_padded():
    table = parse_csv("a,b,c\n1\n")
    assert table.rows[0] == {"a": "1", "b": "", "c": ""}


def test_extra_fields_are_dropped():
    table = parse_csv("a,b\n1,2,3,4\n")
    assert table.rows[0] == {"a": "1", "b": "2"}


def test_values_are_never_typed():
    table = parse_csv("n,f\n1,2.5\n")
    assert table.rows[0] == {"n": "1", "f": "2.5"}


def test_duplicate_headers_are_rejected():
    with pytest.raises(MalformedInputError, match="duplicate"):
        parse_csv("id,ID\n1,2\n")


def test_empty_header_name_is_rejected():
    with pytest.raises(MalformedInputError):
        parse_csv("id,,name\n1,2,3\n")


def test_reserialized_table_parses_back_to_same_shape():
    text = 'product,price,note\nTea,3.50,"hot, sweet"\nCoffee,2.75,\nWater,0,"cold"\n'
    table = parse_csv(text)
    again = parse_csv(table.to_csv())
    assert again.headers == table.headers
    assert len(again.rows) == len(table.rows)
    assert again.rows[0]["note"] == "hot, sweet"


def test_from_payload_fills_and_coerces_values():
    table = ParsedTable.from_payload({
        "headers": ["Name", "Age", "City"],
        "rows": [{"Name": "Ann", "Age": 30, "City": None, "Ignored": "x"}, {"Name": "Bob"}],
    })
    assert table.rows[0] == {"Name": "Ann", "Age": "30", "City": ""}
    assert table.rows[1] == {"Name": "Bob", "Age": "", "City": ""}


@pytest.mark.parametrize("payload", [
    None,
    [],
    {"rows": []},
    {"headers": [], "rows": []},
    {"headers": ["a", 1], "rows": []},
    {"headers": ["a"], "rows": "nope"},
    {"headers": ["a"], "rows": [["1"]]},
])
def test_from_payload_rejects_bad_shapes(payload):
    with pytest.raises(MalformedInputError):
        ParsedTable.from_payload(payload)
