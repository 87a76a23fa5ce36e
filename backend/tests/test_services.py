"""
Samanvi Backend — Service Unit Tests
======================================

What:  Business rules of the services with repositories and the password
       hasher replaced by mocks (no database).

What we test:
    ✅ Login failures look identical and unknown users still cost a bcrypt check
    ✅ Registration conflicts are rejected before any hashing
    ✅ Updates only touch supplied fields and re-hash passwords
    ✅ Bus delete guard, pagination arithmetic
    ✅ Missing-required decision per bus
    ✅ Dashboard expiry windows share one instant
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from app.exceptions import ConflictError, NotFoundError, UnauthorizedError
from app.schemas.bus import BusUpdate
from app.schemas.bus_document import BusDocumentCreate
from app.schemas.user import LoginRequest, UserCreate, UserUpdate
from app.services.bus_document_service import BusDocumentService, parse_required_types
from app.services.bus_service import BusService
from app.services.dashboard_service import DashboardService
from app.services.user_service import UserService

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def make_hasher():
    hasher = MagicMock()
    hasher.hash = AsyncMock(return_value="$2b$04$hashed")
    hasher.verify = AsyncMock(return_value=True)
    hasher.burn = AsyncMock()
    return hasher


def make_user(**fields):
    values = dict(
        id=1,
        username="driver_01",
        email=None,
        password="$2b$04$stored",
        is_active=True,
        created_at=NOW,
        updated_at=NOW,
    )
    values.update(fields)
    return SimpleNamespace(**values)


def make_doc_type(name):
    return SimpleNamespace(
        id=name.lower(), name=name, description=None, created_at=NOW, updated_at=NOW
    )


def make_bus(bus_id, *type_names):
    documents = [
        SimpleNamespace(
            id=f"{bus_id}-{name}",
            bus_id=bus_id,
            doc_type_id=name.lower(),
            document_number=None,
            issue_date=None,
            expiry_date=None,
            file_url="https://files.example.com/doc.pdf",
            remarks=None,
            uploaded_at=NOW,
            doc_type=make_doc_type(name),
        )
        for name in type_names
    ]
    return SimpleNamespace(
        id=bus_id,
        registration_no=bus_id.upper(),
        model=None,
        manufacturer=None,
        year_of_make=None,
        owner_name=None,
        created_at=NOW,
        updated_at=NOW,
        documents=documents,
    )


# ══════════════════════════════════════════════════════════════════════════
# UserService
# ══════════════════════════════════════════════════════════════════════════


class TestUserServiceLogin:
    def setup_method(self):
        self.hasher = make_hasher()
        self.service = UserService(hasher=self.hasher)

    @pytest.mark.asyncio
    async def test_unknown_user_burns_a_hash(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo_cls.return_value.find_by_username = AsyncMock(return_value=None)

            with pytest.raises(UnauthorizedError) as exc_info:
                await self.service.login(
                    mock_db_session, LoginRequest(username="ghost", password="secret123")
                )

        assert exc_info.value.message == "Invalid credentials"
        self.hasher.burn.assert_awaited_once_with("secret123")
        self.hasher.verify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wrong_password_same_message(self, mock_db_session):
        self.hasher.verify = AsyncMock(return_value=False)
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo_cls.return_value.find_by_username = AsyncMock(return_value=make_user())

            with pytest.raises(UnauthorizedError) as exc_info:
                await self.service.login(
                    mock_db_session, LoginRequest(username="driver_01", password="wrong")
                )

        assert exc_info.value.message == "Invalid credentials"
        self.hasher.verify.assert_awaited_once_with("wrong", "$2b$04$stored")

    @pytest.mark.asyncio
    async def test_success(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo_cls.return_value.find_by_username = AsyncMock(
                return_value=make_user(email="d@example.com")
            )

            result = await self.service.login(
                mock_db_session, LoginRequest(username="driver_01", password="secret123")
            )

        assert result.message == "Login successful"
        assert result.user.login is True
        assert result.user.email == "d@example.com"


class TestUserServiceWrites:
    def setup_method(self):
        self.hasher = make_hasher()
        self.service = UserService(hasher=self.hasher)

    @pytest.mark.asyncio
    async def test_conflict_rejected_before_hashing(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo_cls.return_value.find_conflicting = AsyncMock(return_value=make_user())
            repo_cls.return_value.create = AsyncMock()

            with pytest.raises(ConflictError):
                await self.service.create_user(
                    mock_db_session, UserCreate(username="driver_01", password="secret123")
                )

        self.hasher.hash.assert_not_awaited()
        repo_cls.return_value.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_stores_hash(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo = repo_cls.return_value
            repo.find_conflicting = AsyncMock(return_value=None)
            repo.create = AsyncMock(return_value=make_user())

            result = await self.service.create_user(
                mock_db_session, UserCreate(username="driver_01", password="secret123")
            )

        repo.create.assert_awaited_once_with(
            {"username": "driver_01", "password": "$2b$04$hashed", "email": None}
        )
        assert result.user.username == "driver_01"

    @pytest.mark.asyncio
    async def test_update_rehashes_and_skips_unsent(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo = repo_cls.return_value
            repo.find_by_id = AsyncMock(return_value=make_user())
            repo.update = AsyncMock(return_value=make_user())

            await self.service.update_user(mock_db_session, 1, UserUpdate(password="newsecret"))

        repo.update.assert_awaited_once_with(1, {"password": "$2b$04$hashed"})

    @pytest.mark.asyncio
    async def test_update_missing_user(self, mock_db_session):
        with patch("app.services.user_service.UserRepository") as repo_cls:
            repo_cls.return_value.find_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.update_user(mock_db_session, 7, UserUpdate(username="abc"))

        assert exc_info.value.message == "User not found"


# ══════════════════════════════════════════════════════════════════════════
# BusService
# ══════════════════════════════════════════════════════════════════════════


class TestBusService:
    def setup_method(self):
        self.service = BusService()

    @pytest.mark.asyncio
    async def test_delete_blocked_by_documents(self, mock_db_session):
        with patch("app.services.bus_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_service.BusDocumentRepository") as doc_repo_cls:
            bus_repo_cls.return_value.find_by_id = AsyncMock(return_value=make_bus("alpha"))
            bus_repo_cls.return_value.delete = AsyncMock()
            doc_repo_cls.return_value.count = AsyncMock(return_value=2)

            with pytest.raises(ConflictError) as exc_info:
                await self.service.delete_bus(mock_db_session, "alpha")

        assert exc_info.value.message == "Cannot delete bus with existing documents"
        bus_repo_cls.return_value.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_list_offset_and_page_count(self, mock_db_session):
        with patch("app.services.bus_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_service.BusDocumentRepository") as doc_repo_cls:
            repo = bus_repo_cls.return_value
            repo.find_many = AsyncMock(return_value=[make_bus("alpha")])
            repo.count = AsyncMock(return_value=21)
            doc_repo_cls.return_value.count_by = AsyncMock(return_value={"alpha": 4})

            result = await self.service.list_buses(mock_db_session, page=3, limit=10)

        assert repo.find_many.await_args.kwargs["offset"] == 20
        assert repo.find_many.await_args.kwargs["limit"] == 10
        assert result.pagination.pages == 3
        assert result.buses[0].count.documents == 4

    @pytest.mark.asyncio
    async def test_update_keeping_own_registration(self, mock_db_session):
        bus = make_bus("alpha")
        with patch("app.services.bus_service.BusRepository") as bus_repo_cls:
            repo = bus_repo_cls.return_value
            repo.find_by_id = AsyncMock(return_value=bus)
            repo.find_by_registration_no = AsyncMock(return_value=bus)
            repo.update = AsyncMock(return_value=bus)

            await self.service.update_bus(
                mock_db_session, "alpha", BusUpdate(registrationNo="ALPHA", model="Starbus")
            )

        repo.update.assert_awaited_once_with("alpha", {"registration_no": "ALPHA", "model": "Starbus"})


# ══════════════════════════════════════════════════════════════════════════
# BusDocumentService
# ══════════════════════════════════════════════════════════════════════════


class TestParseRequiredTypes:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, []),
            ("", []),
            ("Insurance", ["Insurance"]),
            (" Insurance , Permit ,, ", ["Insurance", "Permit"]),
            (",,", []),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_required_types(raw) == expected


class TestMissingRequired:
    def setup_method(self):
        self.service = BusDocumentService()

    @pytest.mark.asyncio
    async def test_reports_buses_lacking_any_required_type(self, mock_db_session):
        buses = [
            make_bus("complete", "Insurance", "Permit"),
            make_bus("partial", "Insurance"),
            make_bus("empty"),
        ]
        with patch("app.services.bus_document_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_document_service.DocumentTypeRepository") as type_repo_cls:
            bus_repo_cls.return_value.find_many = AsyncMock(return_value=buses)
            type_repo_cls.return_value.list_names = AsyncMock()

            result = await self.service.get_buses_missing_required(
                mock_db_session, types="Insurance,Permit"
            )

        assert [bus.id for bus in result.buses] == ["partial", "empty"]
        assert result.total == 2
        assert result.required_types == ["Insurance", "Permit"]
        type_repo_cls.return_value.list_names.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_defaults_to_all_type_names(self, mock_db_session):
        with patch("app.services.bus_document_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_document_service.DocumentTypeRepository") as type_repo_cls:
            bus_repo_cls.return_value.find_many = AsyncMock(return_value=[make_bus("a", "Permit")])
            type_repo_cls.return_value.list_names = AsyncMock(return_value=["Insurance", "Permit"])

            result = await self.service.get_buses_missing_required(mock_db_session, types=" , ")

        assert result.required_types == ["Insurance", "Permit"]
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_no_document_types_means_nothing_missing(self, mock_db_session):
        with patch("app.services.bus_document_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_document_service.DocumentTypeRepository") as type_repo_cls:
            bus_repo_cls.return_value.find_many = AsyncMock(return_value=[make_bus("a")])
            type_repo_cls.return_value.list_names = AsyncMock(return_value=[])

            result = await self.service.get_buses_missing_required(mock_db_session)

        assert result.total == 0


class TestCreateDocumentLookups:
    @pytest.mark.asyncio
    async def test_bus_checked_before_type(self, mock_db_session):
        with patch("app.services.bus_document_service.BusRepository") as bus_repo_cls, \
             patch("app.services.bus_document_service.DocumentTypeRepository") as type_repo_cls:
            bus_repo_cls.return_value.find_by_id = AsyncMock(return_value=None)
            type_repo_cls.return_value.find_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await BusDocumentService().create_document(
                    mock_db_session,
                    "missing",
                    BusDocumentCreate(docTypeId="t", fileUrl="https://x.example.com/a"),
                )

        assert exc_info.value.message == "Bus not found"
        type_repo_cls.return_value.find_by_id.assert_not_awaited()


# ══════════════════════════════════════════════════════════════════════════
# DashboardService
# ══════════════════════════════════════════════════════════════════════════


class TestDashboardService:
    @pytest.mark.asyncio
    async def test_windows_share_one_instant(self, mock_db_session):
        with patch("app.services.dashboard_service.utc_now", return_value=NOW), \
             patch("app.services.dashboard_service.BusRepository") as bus_repo_cls, \
             patch("app.services.dashboard_service.UserRepository") as user_repo_cls, \
             patch("app.services.dashboard_service.DocumentTypeRepository") as type_repo_cls, \
             patch("app.services.dashboard_service.BusDocumentRepository") as doc_repo_cls:
            bus_repo_cls.return_value.count = AsyncMock(return_value=5)
            user_repo_cls.return_value.count = AsyncMock(return_value=8)
            type_repo_cls.return_value.count = AsyncMock(return_value=6)
            doc_repo_cls.return_value.count = AsyncMock(side_effect=[40, 7, 3])

            stats = await DashboardService().get_stats(mock_db_session)

        assert stats.total_buses == 5
        assert stats.total_voice_app_users == 8
        assert stats.total_documents == 40
        assert stats.expiring_documents == 7
        assert stats.expired_documents == 3
        assert stats.total_document_types == 6
        assert stats.last_updated == NOW

        expiring_clause = doc_repo_cls.return_value.count.await_args_list[1].args[0]
        expired_clause = doc_repo_cls.return_value.count.await_args_list[2].args[0]
        assert expiring_clause.right.value == NOW + timedelta(days=30)
        assert expired_clause.right.value == NOW
