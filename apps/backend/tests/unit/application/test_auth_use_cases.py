"""
Name: Auth + User Admin Use Case Tests

Responsibilities:
  - Register / login contracts (conflict, generic credential error)
  - Role assignment rules (self, developer grant, invalid role)
  - Admin password reset to the configured default
  - Password recovery token flow (single use, generic message)

Collaborators:
  - InMemoryUserRepository
  - LoggingEmailSender (records sent emails)
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from threading import Barrier
from unittest.mock import Mock
from urllib.parse import parse_qs, urlparse

import pytest
from tienda.application.usecases.auth import (
    RESET_REQUESTED_MESSAGE,
    AssignRoleInput,
    AssignRoleUseCase,
    AuthErrorCode,
    ChangePasswordInput,
    ChangePasswordUseCase,
    ConsumePasswordResetInput,
    ConsumePasswordResetUseCase,
    LoginUserInput,
    LoginUserUseCase,
    RegisterUserInput,
    RegisterUserUseCase,
    RequestPasswordResetInput,
    RequestPasswordResetUseCase,
    ResetPasswordByAdminInput,
    ResetPasswordByAdminUseCase,
    UpdateProfileInput,
    UpdateProfileUseCase,
)
from tienda.crosscutting.exceptions import EmailDeliveryError
from tienda.domain.repositories import UserRepository
from tienda.domain.services import EmailSender
from tienda.identity.passwords import hash_password, hash_reset_token, verify_password
from tienda.identity.users import Address, UserRole
from tienda.infrastructure.repositories.in_memory import InMemoryUserRepository
from tienda.infrastructure.services.email_sender import LoggingEmailSender

pytestmark = pytest.mark.unit


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


def _user(users, role=UserRole.USER, email=None, password="secret123"):
    return users.create_user(
        email=email or f"{role.value}@example.com",
        password_hash=hash_password(password),
        role=role,
        name=role.value.title(),
    )


def _token_from(html: str) -> str:
    href = html.split('href="', 1)[1].split('"', 1)[0].replace("&amp;", "&")
    return parse_qs(urlparse(href).query)["token"][0]


class TestRegisterAndLogin:
    def test_register_normalizes_email_and_assigns_user_role(self, users):
        result = RegisterUserUseCase(users).execute(
            RegisterUserInput(email="  Ana@Example.COM ", password="secret123", name="Ana")
        )

        assert result.error is None
        assert result.user.email == "ana@example.com"
        assert result.user.role == UserRole.USER
        assert result.user.password_hash != "secret123"

    def test_register_duplicate_email_conflicts(self, users):
        _user(users, email="ana@example.com")

        result = RegisterUserUseCase(users).execute(
            RegisterUserInput(email="ANA@example.com", password="secret123")
        )

        assert result.error.code == AuthErrorCode.CONFLICT

    def test_register_short_password_is_rejected(self, users):
        result = RegisterUserUseCase(users).execute(
            RegisterUserInput(email="ana@example.com", password="123")
        )

        assert result.error.code == AuthErrorCode.VALIDATION_ERROR

    def test_login_unknown_email_and_wrong_password_look_the_same(self, users):
        _user(users, email="ana@example.com")
        login = LoginUserUseCase(users)

        unknown = login.execute(LoginUserInput(email="nadie@example.com", password="x"))
        wrong = login.execute(LoginUserInput(email="ana@example.com", password="nope"))

        assert unknown.error == wrong.error
        assert unknown.error.code == AuthErrorCode.INVALID_CREDENTIALS

    def test_login_ok(self, users):
        user = _user(users, email="ana@example.com")

        result = LoginUserUseCase(users).execute(
            LoginUserInput(email="ANA@example.com", password="secret123")
        )

        assert result.user.id == user.id


class TestAccount:
    def test_change_password_requires_current(self, users):
        user = _user(users)
        use_case = ChangePasswordUseCase(users)

        wrong = use_case.execute(ChangePasswordInput(user.id, "bad", "nuevo123"))
        ok = use_case.execute(ChangePasswordInput(user.id, "secret123", "nuevo123"))

        assert wrong.error.code == AuthErrorCode.INVALID_CREDENTIALS
        assert ok.error is None
        assert verify_password("nuevo123", users.get_user_by_id(user.id).password_hash)

    def test_update_profile(self, users):
        user = _user(users)

        result = UpdateProfileUseCase(users).execute(
            UpdateProfileInput(
                user_id=user.id,
                name=" Ana ",
                phone="1155",
                address=Address(street="Mitre", number="10", city="Rosario"),
            )
        )

        assert result.user.name == "Ana"
        assert result.user.address.city == "Rosario"

    def test_update_profile_rejects_blank_name(self, users):
        user = _user(users)

        result = UpdateProfileUseCase(users).execute(
            UpdateProfileInput(user_id=user.id, name="   ")
        )

        assert result.error.code == AuthErrorCode.VALIDATION_ERROR


class TestAssignRole:
    def test_admin_promotes_customer_to_admin(self, users):
        admin = _user(users, UserRole.ADMIN)
        customer = _user(users)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=admin, target_user_id=customer.id, role="ADMIN")
        )

        assert result.error is None
        assert result.previous_role == UserRole.USER
        assert users.get_user_by_id(customer.id).role == UserRole.ADMIN

    def test_nobody_changes_their_own_role(self, users):
        developer = _user(users, UserRole.DEVELOPER)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=developer, target_user_id=developer.id, role="user")
        )

        assert result.error.code == AuthErrorCode.SELF_MODIFICATION

    def test_admin_cannot_grant_developer(self, users):
        admin = _user(users, UserRole.ADMIN)
        customer = _user(users)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=admin, target_user_id=customer.id, role="developer")
        )

        assert result.error.code == AuthErrorCode.FORBIDDEN
        assert users.get_user_by_id(customer.id).role == UserRole.USER

    def test_admin_demotes_developer(self, users):
        admin = _user(users, UserRole.ADMIN)
        developer = _user(users, UserRole.DEVELOPER)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=admin, target_user_id=developer.id, role="user")
        )

        assert result.error is None
        assert result.previous_role == UserRole.DEVELOPER
        assert users.get_user_by_id(developer.id).role == UserRole.USER

    def test_developer_grants_developer(self, users):
        developer = _user(users, UserRole.DEVELOPER)
        admin = _user(users, UserRole.ADMIN)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=developer, target_user_id=admin.id, role="developer")
        )

        assert result.user.role == UserRole.DEVELOPER

    def test_invalid_role(self, users):
        admin = _user(users, UserRole.ADMIN)
        customer = _user(users)

        result = AssignRoleUseCase(users).execute(
            AssignRoleInput(actor=admin, target_user_id=customer.id, role="superuser")
        )

        assert result.error.code == AuthErrorCode.VALIDATION_ERROR


class TestAdminPasswordReset:
    def test_sets_configured_default_password(self, users):
        admin = _user(users, UserRole.ADMIN)
        customer = _user(users)

        result = ResetPasswordByAdminUseCase(users, default_password="1234abcd").execute(
            ResetPasswordByAdminInput(actor=admin, target_user_id=customer.id)
        )

        assert result.temporary_password == "1234abcd"
        stored = users.get_user_by_id(customer.id)
        assert verify_password("1234abcd", stored.password_hash)

    def test_admin_resets_developer(self, users):
        admin = _user(users, UserRole.ADMIN)
        developer = _user(users, UserRole.DEVELOPER)

        result = ResetPasswordByAdminUseCase(users, default_password="1234abcd").execute(
            ResetPasswordByAdminInput(actor=admin, target_user_id=developer.id)
        )

        assert result.error is None
        stored = users.get_user_by_id(developer.id)
        assert verify_password("1234abcd", stored.password_hash)


class TestPasswordRecovery:
    def _request(self, users, sender, email):
        return RequestPasswordResetUseCase(
            users, sender, frontend_url="https://tienda.example/", ttl_minutes=120
        ).execute(RequestPasswordResetInput(email=email))

    def test_unknown_email_gets_generic_message_and_no_email(self, users):
        sender = LoggingEmailSender()

        result = self._request(users, sender, "nadie@example.com")

        assert result.message == RESET_REQUESTED_MESSAGE
        assert sender.sent == []

    def test_full_flow_is_single_use(self, users):
        user = _user(users, email="ana@example.com")
        sender = LoggingEmailSender()

        requested = self._request(users, sender, "ANA@example.com")
        assert requested.message == RESET_REQUESTED_MESSAGE
        assert len(sender.sent) == 1
        assert sender.sent[0].to == "ana@example.com"
        assert "https://tienda.example/pages/reset-password.html?token=" in sender.sent[0].html

        token = _token_from(sender.sent[0].html)
        stored = users.get_user_by_id(user.id)
        assert stored.reset_token_hash == hash_reset_token(token)
        assert stored.reset_token_hash != token

        consume = ConsumePasswordResetUseCase(users)
        first = consume.execute(ConsumePasswordResetInput(token=token, new_password="nuevo123"))
        second = consume.execute(ConsumePasswordResetInput(token=token, new_password="otro1234"))

        assert first.error is None
        assert verify_password("nuevo123", users.get_user_by_id(user.id).password_hash)
        assert second.error.code == AuthErrorCode.INVALID_TOKEN

    def test_expired_token_is_rejected(self, users):
        user = _user(users)
        users.set_reset_token(
            user.id,
            hash_reset_token("tok"),
            datetime.now(timezone.utc) - timedelta(minutes=1),
        )

        result = ConsumePasswordResetUseCase(users).execute(
            ConsumePasswordResetInput(token="tok", new_password="nuevo123")
        )

        assert result.error.code == AuthErrorCode.INVALID_TOKEN

    def test_delivery_failure_clears_token(self, users):
        user = _user(users, email="ana@example.com")
        sender = Mock(spec=EmailSender)
        sender.send.side_effect = EmailDeliveryError("smtp down")

        result = self._request(users, sender, "ana@example.com")

        assert result.error.code == AuthErrorCode.INTERNAL_ERROR
        assert users.get_user_by_id(user.id).reset_token_hash is None

    def test_concurrent_consumption_succeeds_once(self, users):
        user = _user(users)
        users.set_reset_token(
            user.id,
            hash_reset_token("tok"),
            datetime.now(timezone.utc) + timedelta(minutes=30),
        )
        workers = 4
        barrier = Barrier(workers)
        consume = ConsumePasswordResetUseCase(users)

        def attempt(i):
            barrier.wait()
            return consume.execute(
                ConsumePasswordResetInput(token="tok", new_password=f"nuevo{i}xx")
            )

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(attempt, range(workers)))

        assert sum(r.error is None for r in results) == 1
        assert users.get_user_by_id(user.id).reset_token_hash is None

    def test_token_consumed_between_lookup_and_write(self):
        user = _user(InMemoryUserRepository())
        repo = Mock(spec=UserRepository)
        repo.get_user_by_reset_token.return_value = user
        repo.consume_reset_token.return_value = None

        result = ConsumePasswordResetUseCase(repo).execute(
            ConsumePasswordResetInput(token="tok", new_password="nuevo123")
        )

        assert result.error.code == AuthErrorCode.INVALID_TOKEN
        repo.update_password.assert_not_called()
