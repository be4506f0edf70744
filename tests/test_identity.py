import pytest

from bookmyticket.db.memory import MemoryDocumentStore
from bookmyticket.db.store import USERS
from bookmyticket.models.user import User
from bookmyticket.services import auth as auth_service
from bookmyticket.services.identity import (
    EmailAlreadyRegistered,
    InvalidCredentials,
    InvalidToken,
    LocalIdentityProvider,
)

from conftest import run


class CapturingMailer:
    def __init__(self):
        self.sent = []

    async def __call__(self, email, token):
        self.sent.append((email, token))


@pytest.fixture
def mailer():
    return CapturingMailer()


@pytest.fixture
def identity(mailer):
    return LocalIdentityProvider(MemoryDocumentStore(), mailer=mailer)


def test_register_creates_non_admin_profile(identity):
    principal = run(auth_service.register(identity, identity.store, "Bob@Example.com", "secret1", "Bob"))

    assert principal.email == "bob@example.com"
    assert identity.current_principal == principal
    doc = run(identity.store.get(USERS, principal.uid))
    user = User.from_document(doc)
    assert user.name == "Bob"
    assert user.admin is False
    assert user.created_at is not None


def test_duplicate_email_is_rejected(identity):
    run(identity.sign_up("bob@example.com", "secret1"))
    with pytest.raises(EmailAlreadyRegistered):
        run(identity.sign_up("BOB@example.com", "other12"))


def test_sign_in_and_out(identity):
    created = run(identity.sign_up("bob@example.com", "secret1"))
    run(identity.sign_out())
    assert identity.current_principal is None

    with pytest.raises(InvalidCredentials):
        run(identity.sign_in("bob@example.com", "wrong"))
    with pytest.raises(InvalidCredentials):
        run(identity.sign_in("nobody@example.com", "secret1"))

    assert run(identity.sign_in("bob@example.com", "secret1")) == created


def test_token_restores_session_on_another_provider(identity):
    created = run(identity.sign_up("bob@example.com", "secret1"))
    token = identity.issue_token()

    other = LocalIdentityProvider(identity.store)
    assert run(other.restore(token)) == created
    assert other.current_principal == created

    with pytest.raises(InvalidToken):
        run(other.restore("not-a-token"))


def test_password_reset(identity, mailer):
    run(identity.sign_up("bob@example.com", "secret1"))

    run(auth_service.request_password_reset(identity, "nobody@example.com"))
    assert mailer.sent == []

    run(auth_service.request_password_reset(identity, "bob@example.com"))
    assert len(mailer.sent) == 1
    email, token = mailer.sent[0]
    assert email == "bob@example.com"

    # a reset token is not a session token
    with pytest.raises(InvalidToken):
        run(identity.restore(token))

    run(identity.confirm_password_reset(token, "newpass1"))
    with pytest.raises(InvalidCredentials):
        run(identity.sign_in("bob@example.com", "secret1"))
    assert run(identity.sign_in("bob@example.com", "newpass1")).email == "bob@example.com"


def test_reset_with_bad_token(identity):
    with pytest.raises(InvalidToken):
        run(identity.confirm_password_reset("garbage", "newpass1"))
