from urllib.parse import parse_qsl, urlencode

from stoney.identity import display_name, read_identity, sign_init_data, verify_init_data

TOKEN = "123456:test-token"
USER = {"id": 42, "first_name": "Ada", "last_name": "L", "username": "ada", "photo_url": "http://x/p.png"}


def test_signed_data_verifies():
    identity = verify_init_data(sign_init_data(USER, TOKEN, auth_date=1700000000), TOKEN)
    assert identity is not None
    assert identity.id == "42"
    assert identity.username == "ada"
    assert identity.photo_url == "http://x/p.png"


def test_wrong_token_is_rejected():
    assert verify_init_data(sign_init_data(USER, TOKEN), "other-token") is None


def test_tampered_user_is_rejected():
    fields = dict(parse_qsl(sign_init_data(USER, TOKEN)))
    fields["user"] = fields["user"].replace("42", "43")
    assert verify_init_data(urlencode(fields), TOKEN) is None


def test_missing_pieces_are_rejected():
    assert verify_init_data("", TOKEN) is None
    assert verify_init_data(sign_init_data(USER, TOKEN), "") is None
    fields = dict(parse_qsl(sign_init_data(USER, TOKEN)))
    del fields["hash"]
    assert verify_init_data(urlencode(fields), TOKEN) is None


def test_signed_payload_without_user_id_is_rejected():
    assert verify_init_data(sign_init_data({"first_name": "Nobody"}, TOKEN), TOKEN) is None


def test_display_name_fallbacks():
    assert display_name({"username": "ada"}) == "ada"
    assert display_name({"first_name": "Ada", "last_name": "L"}) == "Ada L"
    assert display_name({"first_name": "Ada"}) == "Ada"
    assert display_name({}) == "Player"


def test_read_identity_does_not_check_the_signature():
    fields = dict(parse_qsl(sign_init_data(USER, TOKEN)))
    fields["hash"] = "0" * 64
    identity = read_identity(urlencode(fields))
    assert identity is not None and identity.id == "42"
    assert read_identity("") is None
    assert read_identity("user=not-json") is None
