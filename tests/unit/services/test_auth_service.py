import uuid
import pytest
from boxoffice.services import auth_service
from boxoffice.domain.users.models import ProfileRole
from boxoffice.domain.exceptions import Unauthorized, Forbidden
from tests.helper import make_actor

SESSION_ID = uuid.UUID("00000000-0000-0000-0000-0000000000aa")


def _user(mocker, *, is_active=True, role=ProfileRole.STAFF):
    profile = mocker.Mock(role=role, display_name="Door")
    return mocker.Mock(id=7, email="door@example.com", password_hash="hash", is_active=is_active, profile=profile)


@pytest.fixture
def login_mocks(mocker):
    return {
        "get_user": mocker.patch("boxoffice.services.auth_service.get_user_by_email", new=mocker.AsyncMock()),
        "verify": mocker.patch("boxoffice.services.auth_service.verify_password", return_value=True),
        "create_session": mocker.patch(
            "boxoffice.services.auth_service.create_session",
            new=mocker.AsyncMock(return_value=mocker.Mock(id=SESSION_ID))
        ),
        "token": mocker.patch("boxoffice.services.auth_service.create_access_token", return_value="jwt-token"),
    }


@pytest.mark.asyncio
async def test_sign_in_opens_session(mocker, login_mocks, auditspan_stub):
    login_mocks["get_user"].return_value = _user(mocker)
    db = mocker.Mock()

    response = await auth_service.sign_in(db, " Door@Example.com ", "secret", ip="10.0.0.1", user_agent="pytest")

    login_mocks["get_user"].assert_awaited_once_with("door@example.com", db)
    login_mocks["verify"].assert_called_once_with("secret", "hash")
    args = login_mocks["create_session"].await_args.args
    assert args[0] is db and args[1] == 7
    assert args[3:] == ("10.0.0.1", "pytest")
    login_mocks["token"].assert_called_once_with(subject=7, sid=str(SESSION_ID))
    assert response.access_token == "jwt-token"
    assert response.sid == str(SESSION_ID)
    assert response.role == ProfileRole.STAFF
    assert auditspan_stub[0].object_id == str(SESSION_ID)


@pytest.mark.asyncio
async def test_sign_in_unknown_email(mocker, login_mocks):
    login_mocks["get_user"].return_value = None

    with pytest.raises(Unauthorized) as e:
        await auth_service.sign_in(mocker.Mock(), "nobody@example.com", "secret")

    assert e.value.ctx == {"reason": "bad_credentials"}
    login_mocks["verify"].assert_not_called()
    login_mocks["create_session"].assert_not_awaited()


@pytest.mark.asyncio
async def test_sign_in_wrong_password(mocker, login_mocks):
    login_mocks["get_user"].return_value = _user(mocker)
    login_mocks["verify"].return_value = False

    with pytest.raises(Unauthorized):
        await auth_service.sign_in(mocker.Mock(), "door@example.com", "wrong")

    login_mocks["create_session"].assert_not_awaited()


@pytest.mark.asyncio
async def test_sign_in_inactive_account(mocker, login_mocks):
    login_mocks["get_user"].return_value = _user(mocker, is_active=False)

    with pytest.raises(Forbidden):
        await auth_service.sign_in(mocker.Mock(), "door@example.com", "secret")

    login_mocks["create_session"].assert_not_awaited()


@pytest.mark.asyncio
async def test_sign_out_revokes_session(mocker, auditspan_stub):
    revoke = mocker.patch("boxoffice.services.auth_service.revoke_session", new=mocker.AsyncMock())
    actor = make_actor()
    db = mocker.Mock()

    await auth_service.sign_out(db, actor)

    revoke.assert_awaited_once_with(db, actor.session_id)
    assert auditspan_stub[0].action == "LOGOUT"


@pytest.mark.asyncio
async def test_get_user_returns_profile(mocker):
    mocker.patch(
        "boxoffice.services.auth_service.get_active_user_with_profile",
        new=mocker.AsyncMock(return_value=_user(mocker, role=ProfileRole.ADMIN))
    )

    me = await auth_service.get_user(mocker.Mock(), make_actor(role=ProfileRole.ADMIN))

    assert me.email == "door@example.com"
    assert me.role == ProfileRole.ADMIN
    assert me.display_name == "Door"
