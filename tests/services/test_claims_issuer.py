from fedauth.models.claims import Claim, ClaimType
from fedauth.models.user import UserInformation
from fedauth.services.claims import ClaimsIssuer


class TestClaimsIssuer:
    def setup_method(self):
        self.issuer = ClaimsIssuer()

    def test_full_profile(self) -> None:
        # Arrange
        info = UserInformation(external_id="u1", email="a@ok.com", user_name="ada")

        # Act
        claims = self.issuer.issue("google", info)

        # Assert
        assert claims == {
            Claim(ClaimType.IDENTIFIER, "u1"),
            Claim(ClaimType.AUTH_METHOD, "google"),
            Claim(ClaimType.NAME, "ada"),
            Claim(ClaimType.EMAIL, "a@ok.com"),
        }

    def test_empty_optional_fields_are_skipped(self) -> None:
        info = UserInformation(external_id="u1", email="", user_name=None)

        claims = self.issuer.issue("google", info)

        assert {claim.type for claim in claims} == {
            ClaimType.IDENTIFIER,
            ClaimType.AUTH_METHOD,
        }

    def test_issuing_twice_gives_the_same_set(self) -> None:
        info = UserInformation(external_id="u1", email="a@ok.com", user_name="ada")

        assert self.issuer.issue("google", info) == self.issuer.issue("google", info)
