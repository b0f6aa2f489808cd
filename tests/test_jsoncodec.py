import pytest

from goish import jsoncodec as js
from goish.streams import Reader, ShortWrite, UnexpectedEOF, Writer, pipe


class _BytesReader(Reader):
    def __init__(self, data: bytes, chunk: int = 1 << 16) -> None:
        self._data = data
        self._chunk = chunk

    def read(self, size: int) -> bytes:
        n = min(size, self._chunk)
        out, self._data = self._data[:n], self._data[n:]
        return out


class _BufferWriter(Writer):
    def __init__(self) -> None:
        self.buffer = bytearray()

    def write(self, data: bytes) -> int:
        self.buffer += data
        return len(data)

    @property
    def text(self) -> str:
        return self.buffer.decode("utf-8")


class _HalfWriter(Writer):
    def write(self, data: bytes) -> int:
        return len(data) // 2


def _decoder(text: str, chunk: int = 1 << 16) -> js.Decoder:
    return js.new_decoder(_BytesReader(text.encode("utf-8"), chunk))


def test_value_construction():
    assert js.is_null(js.make_null())
    assert not js.is_bool(js.make_null())
    assert js.make_bool(True) is True
    assert js.make_int(42) == 42 and js.is_int(js.make_int(42))
    assert js.make_float(3.14) == pytest.approx(3.14)
    assert js.is_float(js.make_float(3.14))
    assert js.make_string("hello") == "hello"
    array = js.make_array([js.make_int(1), js.make_int(2), js.make_int(3)])
    assert js.is_array(array) and len(array) == 3
    obj = js.make_object({"name": js.make_string("John"), "age": js.make_int(30)})
    assert js.is_object(obj) and len(obj) == 2


def test_make_rejects_bad_input():
    with pytest.raises(TypeError):
        js.make_int(1.5)
    with pytest.raises(TypeError):
        js.make_string(3)
    with pytest.raises(TypeError):
        js.make_object({1: "x"})
    with pytest.raises(js.JSONError):
        js.make_float(float("nan"))


def test_basic_marshal_unmarshal():
    assert js.marshal_string(js.make_string("hello")) == '"hello"'
    assert js.marshal_string(js.make_int(42)) == "42"
    assert js.marshal_string(js.make_bool(True)) == "true"
    assert js.marshal_string(js.make_null()) == "null"
    assert js.unmarshal_string('"hello"') == "hello"
    value = js.unmarshal_string("42")
    assert value == 42 and js.is_int(value)


def test_array_round_trip():
    array = js.make_array([js.make_int(1), js.make_string("two"), js.make_bool(True), js.make_null()])
    back = js.unmarshal_string(js.marshal_string(array))
    assert js.is_array(back) and len(back) == 4
    assert js.get_int(back[0]) == 1
    assert js.get_string(back[1]) == "two"
    assert js.get_bool(back[2]) is True
    assert js.is_null(back[3])


def test_object_round_trip():
    obj = js.make_object({
        "name": "John Doe",
        "age": 30,
        "active": True,
        "score": 95.5,
        "address": None,
    })
    back = js.unmarshal_string(js.marshal_string(obj))
    assert js.is_object(back)
    assert js.get_string(back["name"]) == "John Doe"
    assert js.get_int(back["age"]) == 30
    assert js.get_bool(back["active"]) is True
    assert js.get_float(back["score"]) == 95.5
    assert js.is_null(back["address"])


def test_nested_structures():
    person = {
        "name": "Alice",
        "age": 28,
        "address": {"street": "123 Main St", "city": "Anytown", "zip": "12345"},
        "hobbies": ["reading", "swimming", "coding"],
    }
    back = js.unmarshal_string(js.marshal_string(person))
    assert js.get_string(back["name"]) == "Alice"
    assert js.get_string(back["address"]["city"]) == "Anytown"
    assert js.get_string(back["hobbies"][1]) == "swimming"


def test_marshal_sorts_keys_and_keeps_unicode():
    assert js.marshal({"b": 1, "a": "é"}) == '{"a":"é","b":1}'.encode("utf-8")


def test_marshal_errors():
    with pytest.raises(js.JSONError, match="marshal error"):
        js.marshal(object())
    with pytest.raises(js.JSONError):
        js.marshal(float("inf"))


@pytest.mark.parametrize(
    "text", ["{}", "[]", '"hello"', "42", "true", "null", '{"key": "value"}']
)
def test_valid_documents(text):
    assert js.valid_string(text) is True
    assert js.valid(text.encode()) is True


@pytest.mark.parametrize(
    "text", ["{", "{key: value}", '"unclosed string', "undefined", "NaN", "1 2"]
)
def test_invalid_documents(text):
    assert js.valid_string(text) is False


def test_compact():
    src = b'{\n        "name": "John",\n        "age": 30,\n        "active": true\n    }'
    assert js.compact(src) == b'{"active":true,"age":30,"name":"John"}'


def test_indent():
    data = js.marshal({"name": "John", "age": 30})
    result = js.indent(data, "", "  ")
    assert result == b'{\n  "age": 30,\n  "name": "John"\n}'


def test_indent_with_prefix():
    assert js.indent(b"[1]", ">", "\t") == b"[\n>\t1\n>]"


def test_encoder():
    writer = _BufferWriter()
    js.new_encoder(writer).encode({"message": "hello", "count": 5})
    assert writer.text == '{"count":5,"message":"hello"}\n'


def test_encoder_indent():
    writer = _BufferWriter()
    encoder = js.new_encoder(writer)
    encoder.set_indent("", "  ")
    encoder.encode({"name": "test", "data": [1, 2]})
    assert writer.text == '{\n  "data": [\n    1,\n    2\n  ],\n  "name": "test"\n}\n'


def test_encoder_escape_html():
    writer = _BufferWriter()
    encoder = js.new_encoder(writer)
    encoder.encode("<a&b>")
    encoder.set_escape_html(False)
    encoder.encode("<a&b>")
    assert writer.text == '"\\u003ca\\u0026b\\u003e"\n"<a&b>"\n'


def test_encoder_short_write():
    with pytest.raises(ShortWrite):
        js.new_encoder(_HalfWriter()).encode([1, 2, 3])


def test_decoder():
    value = _decoder('{"name":"test","value":42}').decode()
    assert js.is_object(value)
    assert js.get_string(value["name"]) == "test"
    assert js.get_int(value["value"]) == 42


def test_decoder_stream_of_values_then_eof():
    dec = _decoder('1 "two" {"a": [3]}\n')
    assert dec.decode() == 1
    assert dec.decode() == "two"
    assert dec.decode() == {"a": [3]}
    with pytest.raises(EOFError):
        dec.decode()


def test_decoder_handles_one_byte_chunks():
    dec = _decoder('123 ["héllo", true]', chunk=1)
    assert dec.decode() == 123
    assert dec.decode() == ["héllo", True]


def test_decoder_use_number():
    dec = _decoder('{"n": 1.50, "m": 7}')
    dec.use_number()
    assert dec.decode() == {"n": "1.50", "m": "7"}


def test_decoder_syntax_error():
    with pytest.raises(js.JSONError):
        _decoder('{"a": }').decode()


def test_decoder_truncated_input():
    with pytest.raises(js.JSONError):
        _decoder('{"a": 1').decode()


def test_decoder_disallow_unknown_fields_keeps_decoding():
    dec = _decoder('{"x": 1}')
    dec.disallow_unknown_fields()
    assert dec.decode() == {"x": 1}


def test_tokens():
    dec = _decoder('{"a": [1, "s", null], "b": true}')
    tokens = []
    while True:
        try:
            tokens.append(dec.token())
        except EOFError:
            break
    assert tokens == ["{", "a", "[", 1, "s", None, "]", "b", True, "}"]


def test_token_and_more_with_decode():
    dec = _decoder("[1, {\"k\": 2}, 3]")
    assert dec.token() == "["
    assert dec.more() is True
    assert dec.decode() == 1
    assert dec.more() is True
    assert dec.decode() == {"k": 2}
    assert dec.more() is True
    assert dec.decode() == 3
    assert dec.more() is False
    assert dec.token() == "]"
    with pytest.raises(EOFError):
        dec.token()


def test_token_unexpected_eof_inside_array():
    dec = _decoder("[1")
    assert dec.token() == "["
    assert dec.token() == 1
    with pytest.raises(UnexpectedEOF):
        dec.token()


def test_token_rejects_misplaced_delimiter():
    dec = _decoder("]")
    with pytest.raises(js.JSONError):
        dec.token()


def test_decoder_over_pipe():
    import threading

    reader, writer = pipe()

    def produce():
        writer.write(b'{"id": ')
        writer.write(b'7}')
        writer.close()

    thread = threading.Thread(target=produce)
    thread.start()
    assert js.new_decoder(reader).decode() == {"id": 7}
    thread.join()


def test_utility_getters_with_defaults():
    assert js.is_null(None)
    assert js.is_bool(True)
    assert js.is_int(42) and not js.is_int(True)
    assert js.is_float(3.14)
    assert js.is_string("test")
    assert js.is_array([1, 2])
    assert js.is_object({"key": "value"})
    assert js.get_bool(True) is True
    assert js.get_bool("test", False) is False
    assert js.get_int(42) == 42
    assert js.get_int("test", 99) == 99
    assert js.get_int(True, 5) == 5
    assert js.get_float(3.14) == 3.14
    assert js.get_float("test", 1.0) == 1.0
    assert js.get_float(2) == 2.0
    assert js.get_string("test") == "test"
    assert js.get_string(42, "default") == "default"
    assert js.get_array("x") == []
    assert js.get_array([1], [2]) == [1]
    assert js.get_object(1, {"d": 1}) == {"d": 1}


def test_unmarshal_error_message():
    with pytest.raises(js.JSONError, match="unmarshal error"):
        js.unmarshal_string("{invalid json")
    with pytest.raises(js.JSONError, match="unmarshal error"):
        js.unmarshal(b"\xff\xfe")


def test_binary_round_trip():
    value = js.unmarshal(b'{"test": 123}')
    assert value == {"test": 123}
    out = js.marshal(value)
    assert out == b'{"test":123}'
    assert js.valid(out)


def test_large_array_round_trip():
    items = [{"id": i, "name": f"item_{i}", "active": i % 2 == 0} for i in range(1000)]
    back = js.unmarshal_string(js.marshal_string(items))
    assert len(back) == 1000
    assert back[999] == {"id": 999, "name": "item_999", "active": False}