import pytest

from fedauth.models.user import UserInformation
from fedauth.services.validation import EmailDomainValidator, validate


def user(email):
    return UserInformation(external_id="u1", email=email)


class TestValidate:
    @pytest.mark.parametrize(
        ("email", "suffixes", "expected"),
        [
            ("a@ok.com", [], True),
            (None, [], True),
            ("a@ok.com", ["@ok.com"], True),
            ("a@OK.COM", ["@ok.com"], True),
            ("a@ok.com", [".OK.com"], True),
            ("a@mail.ok.com", [".ok.com"], True),
            ("a@notok.com", [".ok.com"], False),
            ("a@bad.com", [".ok.com"], False),
            ("a@bad.com", [".ok.com", "bad.com"], True),
        ],
    )
    def test_suffix_matching(self, email, suffixes, expected) -> None:
        assert validate(user(email), suffixes) is expected

    @pytest.mark.parametrize("email", [None, ""])
    def test_missing_email_never_matches_a_restriction(self, email) -> None:
        assert validate(user(email), [".ok.com"]) is False

    def test_casing_is_locale_independent(self) -> None:
        # Dotted capital I must not turn into a Turkish dotless i
        assert validate(user("a@MAIL.IO"), ["@mail.io"]) is True

    def test_sharp_s_is_not_expanded(self) -> None:
        assert validate(user("a@straße.de"), ["@strasse.de"]) is False


class TestEmailDomainValidator:
    def test_unrestricted_by_default(self) -> None:
        assert EmailDomainValidator().validate(user(None)) is True

    def test_bound_suffixes(self) -> None:
        validator = EmailDomainValidator([".ok.com"])

        assert validator.validate(user("a@ok.com")) is True
        assert validator.validate(user("a@bad.com")) is False
