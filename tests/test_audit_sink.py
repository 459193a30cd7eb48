"""
Tests da trilha de auditoria.

- log grava e devolve id/created_at
- list_by_user: só do usuário, mais recentes primeiro, com limite
- falha de auditoria nunca derruba a operação que a gerou
"""

import pytest

from conftest import USER_A, USER_B, new_secret
from psvault.controllers.audit_controller import AuditController
from psvault.controllers.schemas import RequestMeta
from psvault.controllers.secret_controller import SecretController
from psvault.controllers.vault_controller import VaultController, VaultCreate
from psvault.exceptions import StoreError
from psvault.models import AuditAction, AuditLog


class TestLog:
    async def test_log_assigns_id_and_timestamp(self, audit):
        entry = await audit.log(AuditLog(
            user_id=USER_A, vault_id="v-1", action=AuditAction.CREATE,
            ip_address="10.0.0.1", user_agent="pytest",
        ))
        assert entry.id is not None
        assert entry.created_at is not None

    async def test_record_accepts_missing_references(self, audit):
        entry = await audit.record(USER_A, AuditAction.VIEW)
        assert entry is not None
        assert entry.vault_id is None
        assert entry.secret_id is None

    async def test_list_by_user_newest_first_and_limited(self, audit):
        for action in (AuditAction.CREATE, AuditAction.VIEW, AuditAction.UPDATE):
            await audit.record(USER_A, action, vault_id="v-1")
        await audit.record(USER_B, AuditAction.DELETE, vault_id="v-2")

        entries = await audit.list_by_user(USER_A)
        assert [e.action for e in entries] == [
            AuditAction.UPDATE, AuditAction.VIEW, AuditAction.CREATE,
        ]
        assert all(e.user_id == USER_A for e in entries)

        assert len(await audit.list_by_user(USER_A, limit=2)) == 2


class TestBestEffort:
    @pytest.fixture
    def broken_audit(self, audit, monkeypatch):
        async def _fail(entry):
            raise StoreError("audit_logs indisponível")

        monkeypatch.setattr(audit, "log", _fail)
        return audit

    async def test_record_swallows_store_error(self, broken_audit):
        assert await broken_audit.record(USER_A, AuditAction.CREATE, vault_id="v") is None

    async def test_vault_create_survives_audit_failure(self, vaults, broken_audit, known_users):
        controller = VaultController(vaults, broken_audit)
        vault = await controller.create(USER_A, VaultCreate(name="Personal"))
        assert await vaults.get_by_id(vault.id) is not None

    async def test_secret_get_survives_audit_failure(self, secrets, vaults, broken_audit, vault_a):
        record = await secrets.create(*new_secret(vault_a.id, "Bank"))
        controller = SecretController(secrets, vaults, broken_audit)
        loaded = await controller.get(USER_A, record.secret.id)
        assert loaded.metadata.title == "Bank"

    async def test_secret_get_survives_last_accessed_failure(
        self, secrets, vaults, audit, vault_a, monkeypatch
    ):
        record = await secrets.create(*new_secret(vault_a.id, "Bank"))

        async def _fail(secret_id):
            raise StoreError("secrets indisponível para escrita")

        monkeypatch.setattr(secrets, "update_last_accessed", _fail)
        controller = SecretController(secrets, vaults, audit)

        loaded = await controller.get(USER_A, record.secret.id)
        assert loaded.metadata.title == "Bank"
        assert loaded.secret.last_accessed_at is None
        # a view continua auditada
        entries = await audit.list_by_user(USER_A)
        assert [e.action for e in entries] == [AuditAction.VIEW]


class TestControllerTrail:
    async def test_vault_lifecycle_is_audited(self, vaults, audit, known_users):
        controller = VaultController(vaults, audit)
        meta = RequestMeta(ip="192.168.0.10", user_agent="psvault-cli/1.0")

        vault = await controller.create(USER_A, VaultCreate(name="Personal"), meta)
        await controller.get(USER_A, vault.id, meta)
        await controller.delete(USER_A, vault.id, meta)

        entries = await audit.list_by_user(USER_A)
        assert [e.action for e in entries] == [
            AuditAction.DELETE, AuditAction.VIEW, AuditAction.CREATE,
        ]
        # histórico sobrevive ao vault apagado
        assert all(e.vault_id == vault.id for e in entries)
        assert entries[0].ip_address == "192.168.0.10"
        assert entries[0].user_agent == "psvault-cli/1.0"

    async def test_audit_controller_clamps_limit(self, audit):
        for _ in range(5):
            await audit.record(USER_A, AuditAction.VIEW)
        controller = AuditController(audit, default_limit=3, max_limit=4)

        assert len(await controller.list_for_user(USER_A)) == 3
        assert len(await controller.list_for_user(USER_A, limit=100)) == 4
        assert len(await controller.list_for_user(USER_A, limit=0)) == 1
