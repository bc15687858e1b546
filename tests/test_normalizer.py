import pytest

from rag_gateway.normalizer import Passthrough, Structured, decode_json, normalize


def test_json_object_is_structured_with_status_preserved():
    outcome = normalize(404, '{"ok": false, "error": "no such file"}')

    assert outcome == Structured(status_code=404, value={"ok": False, "error": "no such file"})


def test_plain_text_becomes_passthrough():
    outcome = normalize(502, "plain text error")

    assert isinstance(outcome, Passthrough)
    assert outcome.ok is False
    assert outcome.as_payload() == {"ok": False, "passthrough": True, "body": "plain text error"}


def test_successful_html_passthrough_reports_ok():
    outcome = normalize(200, "<html><body>hi</body></html>")

    assert isinstance(outcome, Passthrough)
    assert outcome.ok is True


@pytest.mark.parametrize("body", ["", "[1, 2]", "null", "42", '"text"', '{"score": NaN}', '{"x": 1e999}'])
def test_non_object_or_non_standard_json_is_passthrough(body):
    outcome = normalize(200, body)

    assert outcome == Passthrough(status_code=200, body=body)


def test_lone_surrogate_cannot_be_rendered_so_is_passthrough():
    body = '{"ok": true, "answer": "\\ud800"}'

    outcome = normalize(200, body)

    assert outcome == Passthrough(status_code=200, body=body)


@pytest.mark.parametrize("body", ['{"load": NaN}', '{"load": Infinity}', '{"a": "\\udfff"}', "nope"])
def test_decode_json_is_strict(body):
    with pytest.raises(ValueError):
        decode_json(body)


def test_decode_json_keeps_valid_unicode():
    assert decode_json('{"answer": "caf\\u00e9 \\ud83d\\ude00"}') == {"answer": "café 😀"}
