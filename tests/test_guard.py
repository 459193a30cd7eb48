"""Tests da regra de posse: ausente → NotFound, de outro usuário → Unauthorized."""

import pytest

from conftest import USER_A, USER_B, new_secret
from psvault.controllers.guard import require_secret, require_vault
from psvault.controllers.secret_controller import SecretController, SecretPatch
from psvault.controllers.vault_controller import VaultController, VaultPatch
from psvault.exceptions import NotFoundError, UnauthorizedError
from psvault.stores import SecretFilter


class TestRequireVault:
    async def test_owner_passes(self, vaults, vault_a):
        vault = await require_vault(vaults, vault_a.id, USER_A)
        assert vault.id == vault_a.id

    async def test_missing(self, vaults, known_users):
        with pytest.raises(NotFoundError):
            await require_vault(vaults, "missing", USER_A)

    async def test_other_user(self, vaults, vault_a):
        with pytest.raises(UnauthorizedError) as exc:
            await require_vault(vaults, vault_a.id, USER_B)
        assert exc.value.user_id == USER_B


class TestRequireSecret:
    async def test_owner_passes(self, secrets, vaults, vault_a):
        created = await secrets.create(*new_secret(vault_a.id))
        record, vault = await require_secret(secrets, vaults, created.secret.id, USER_A)
        assert record.secret.id == created.secret.id
        assert vault.id == vault_a.id

    async def test_missing(self, secrets, vaults, known_users):
        with pytest.raises(NotFoundError):
            await require_secret(secrets, vaults, "missing", USER_A)

    async def test_other_user(self, secrets, vaults, vault_a):
        created = await secrets.create(*new_secret(vault_a.id))
        with pytest.raises(UnauthorizedError):
            await require_secret(secrets, vaults, created.secret.id, USER_B)


class TestControllersRefuseOtherUser:
    """Nada muda quando o dono não confere."""

    async def test_vault_update_and_delete(self, vaults, audit, vault_a):
        controller = VaultController(vaults, audit)
        with pytest.raises(UnauthorizedError):
            await controller.update(USER_B, vault_a.id, VaultPatch(name="Hacked"))
        with pytest.raises(UnauthorizedError):
            await controller.delete(USER_B, vault_a.id)

        loaded = await vaults.get_by_id(vault_a.id)
        assert loaded.name == "Personal"
        assert await audit.list_by_user(USER_B) == []

    async def test_secret_ops(self, secrets, vaults, audit, vault_a, vault_b):
        controller = SecretController(secrets, vaults, audit)
        created = await secrets.create(*new_secret(vault_a.id, "Bank", payload=b"orig"))
        sid = created.secret.id

        with pytest.raises(UnauthorizedError):
            await controller.get(USER_B, sid)
        with pytest.raises(UnauthorizedError):
            await controller.update(USER_B, sid, SecretPatch(encrypted_payload=b"evil"))
        with pytest.raises(UnauthorizedError):
            await controller.delete(USER_B, sid)
        with pytest.raises(UnauthorizedError):
            await controller.list_by_vault(USER_B, vault_a.id)

        loaded = await secrets.get_by_id(sid)
        assert loaded.secret.encrypted_payload == b"orig"
        assert loaded.secret.last_accessed_at is None
        assert await controller.search(USER_B, SecretFilter(title="bank")) == []

    async def test_secret_patch_keeps_omitted_fields(self, secrets, vaults, audit, vault_a):
        controller = SecretController(secrets, vaults, audit)
        created = await secrets.create(*new_secret(vault_a.id, "Bank", payload=b"orig", tags=["x"]))

        updated = await controller.update(USER_A, created.secret.id, SecretPatch(encryption_version=3))

        assert updated.secret.encryption_version == 3
        assert updated.secret.encrypted_payload == b"orig"
        assert updated.metadata.title == "Bank"
        assert updated.metadata.tags == ["x"]
