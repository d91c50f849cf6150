import pytest

from filestore.errors import DecodeError
from filestore.filename_codec import SAFE_ALPHABET, decode, describe_filename, encode


NAMES = [
    "",
    "report.pdf",
    "ทดสอบภาษาไทย.txt",
    "ภาษาไทย ที่มีวรรณยุกต์ ่ ้ ๊ ๋.docx",
    "été.txt",
    "résumé (final).pdf",
    "数据报告.xlsx",
    "📄 notes.md",
    ".hidden",
    "line\nbreak\ttab",
]


@pytest.mark.parametrize("name", NAMES)
def test_decode_inverts_encode(name):
    assert decode(encode(name)) == name


@pytest.mark.parametrize("name", NAMES)
def test_encode_uses_only_safe_alphabet(name):
    token = encode(name)
    assert SAFE_ALPHABET.issuperset(token)
    token.encode('ascii')


def test_encode_empty_string():
    assert encode("") == ""
    assert decode("") == ""


def test_encode_matches_standard_base64():
    # Same value the original service wrote for this filename
    assert encode("ทดสอบ.txt") == "4LiX4LiU4Liq4Lit4LiaLnR4dA=="


@pytest.mark.parametrize("token", [
    "!!!!",
    "QQ",
    "QQ=",
    "QR==",
    "//4=",
    " QQ==",
    "4LiX4LiU\n",
    "ทดสอบ",
])
def test_decode_rejects_invalid_tokens(token):
    with pytest.raises(DecodeError):
        decode(token)


def test_decode_rejects_non_string():
    with pytest.raises(DecodeError):
        decode(None)
    with pytest.raises(DecodeError):
        decode(b"QQ==")


def test_decode_error_is_value_error():
    with pytest.raises(ValueError):
        decode("QQ")


def test_describe_filename_lists_code_points():
    details = describe_filename("ทa")
    assert details["is_ascii"] is False
    assert details["utf8_hex"] == "e0b89761"
    assert [cp["code_point"] for cp in details["code_points"]] == ["0e17", "0061"]
