import json
import pytest
from google.auth.exceptions import RefreshError
from services.auth_service import TokenFileCredentialProvider
from utils.errors import AuthenticationRequiredError


@pytest.fixture
def token_file(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("{}")
    return str(path)


def test_missing_token_file_requires_auth(tmp_path):
    provider = TokenFileCredentialProvider(str(tmp_path / "missing.json"))
    with pytest.raises(AuthenticationRequiredError) as exc_info:
        provider.get_valid_credential()
    assert exc_info.value.message == "No authenticated session found"


def test_unconfigured_token_file_requires_auth():
    with pytest.raises(AuthenticationRequiredError):
        TokenFileCredentialProvider(None).get_valid_credential()


def test_unreadable_token_requires_auth(token_file, mocker):
    mocker.patch(
        "services.auth_service.Credentials.from_authorized_user_info",
        side_effect=ValueError("missing fields"),
    )
    with pytest.raises(AuthenticationRequiredError, match="invalid"):
        TokenFileCredentialProvider(token_file).get_valid_credential()


def test_valid_credentials_returned(token_file, mocker):
    credentials = mocker.Mock(valid=True)
    mocker.patch("services.auth_service.Credentials.from_authorized_user_info", return_value=credentials)
    assert TokenFileCredentialProvider(token_file).get_valid_credential() is credentials


def test_expired_credentials_are_refreshed_and_saved(token_file, mocker):
    credentials = mocker.Mock(valid=False, expired=True, refresh_token="refresh")
    credentials.to_json.return_value = '{"token": "new"}'
    mocker.patch("services.auth_service.Credentials.from_authorized_user_info", return_value=credentials)

    result = TokenFileCredentialProvider(token_file).get_valid_credential()

    assert result is credentials
    credentials.refresh.assert_called_once()
    with open(token_file) as fh:
        assert fh.read() == '{"token": "new"}'


def test_failed_refresh_requires_auth(token_file, mocker):
    credentials = mocker.Mock(valid=False, expired=True, refresh_token="refresh")
    credentials.refresh.side_effect = RefreshError("invalid_grant")
    mocker.patch("services.auth_service.Credentials.from_authorized_user_info", return_value=credentials)
    with pytest.raises(AuthenticationRequiredError, match="could not be refreshed"):
        TokenFileCredentialProvider(token_file).get_valid_credential()


def test_expired_without_refresh_token_requires_auth(token_file, mocker):
    credentials = mocker.Mock(valid=False, expired=True, refresh_token=None)
    mocker.patch("services.auth_service.Credentials.from_authorized_user_info", return_value=credentials)
    with pytest.raises(AuthenticationRequiredError):
        TokenFileCredentialProvider(token_file).get_valid_credential()


def test_client_details_completed_from_client_secret_file(tmp_path, mocker):
    token_path = tmp_path / "token.json"
    token_path.write_text(json.dumps({"token": "abc", "refresh_token": "refresh"}))
    secret_path = tmp_path / "client_secret.json"
    secret_path.write_text(json.dumps({"installed": {"client_id": "id.apps", "client_secret": "s3cret"}}))
    credentials = mocker.Mock(valid=True)
    from_info = mocker.patch("services.auth_service.Credentials.from_authorized_user_info", return_value=credentials)

    provider = TokenFileCredentialProvider(str(token_path), client_secret_file=str(secret_path))

    assert provider.get_valid_credential() is credentials
    info = from_info.call_args.args[0]
    assert (info["client_id"], info["client_secret"]) == ("id.apps", "s3cret")
    assert info["refresh_token"] == "refresh"


def test_token_client_details_take_precedence(tmp_path, mocker):
    token_path = tmp_path / "token.json"
    token_path.write_text(json.dumps({"refresh_token": "r", "client_id": "own", "client_secret": "own-secret"}))
    from_info = mocker.patch(
        "services.auth_service.Credentials.from_authorized_user_info", return_value=mocker.Mock(valid=True)
    )

    TokenFileCredentialProvider(str(token_path), client_secret_file=str(tmp_path / "absent.json")).get_valid_credential()

    assert from_info.call_args.args[0]["client_id"] == "own"


def test_missing_client_secret_file_requires_auth(token_file, tmp_path):
    provider = TokenFileCredentialProvider(token_file, client_secret_file=str(tmp_path / "absent.json"))
    with pytest.raises(AuthenticationRequiredError, match="invalid"):
        provider.get_valid_credential()


def test_malformed_token_file_requires_auth(tmp_path):
    path = tmp_path / "token.json"
    path.write_text("not json")
    with pytest.raises(AuthenticationRequiredError, match="invalid"):
        TokenFileCredentialProvider(str(path)).get_valid_credential()
