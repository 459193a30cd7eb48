"""Tests do VaultStore — CRUD por id, listagem por dono, cascade."""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select, update

from conftest import USER_A, USER_B, new_secret
from psvault.exceptions import StoreError
from psvault.models import Secret, SecretMetadata, Vault


class TestCreate:
    async def test_assigns_id_and_timestamps(self, vaults, known_users):
        vault = await vaults.create(Vault(
            user_id=USER_A,
            name="Test Vault",
            description="A test vault",
            encrypted_key=b"encrypted-key-data-12345",
            key_encryption_version=1,
        ))
        assert vault.id
        assert vault.created_at is not None
        assert vault.updated_at is not None
        assert vault.description == "A test vault"

    async def test_minimal_fields(self, vaults, known_users):
        vault = await vaults.create(Vault(user_id=USER_A, name="Minimal Vault"))
        assert vault.id
        assert vault.encrypted_key is None
        assert vault.key_encryption_version is None

    async def test_unknown_user_violates_fk(self, vaults, known_users):
        with pytest.raises(StoreError):
            await vaults.create(Vault(user_id="ghost", name="Invalid Vault"))

    async def test_encrypted_key_persists_exactly(self, vaults, known_users):
        key = b"U2FsdGVkX1+vupppZksvRf5pq5g5XjFRlipRkwB0K1Y=\x00\xff"
        vault = await vaults.create(Vault(
            user_id=USER_A, name="Crypto Vault", encrypted_key=key, key_encryption_version=2,
        ))
        loaded = await vaults.get_by_id(vault.id)
        assert loaded.encrypted_key == key
        assert loaded.key_encryption_version == 2


class TestRead:
    async def test_get_by_id(self, vaults, vault_a):
        loaded = await vaults.get_by_id(vault_a.id)
        assert loaded.id == vault_a.id
        assert loaded.name == "Personal"
        assert loaded.user_id == USER_A

    async def test_get_missing_returns_none(self, vaults, known_users):
        assert await vaults.get_by_id("00000000-0000-0000-0000-000000000000") is None

    async def test_list_by_user_newest_first(self, vaults, sessions, known_users):
        first = await vaults.create(Vault(user_id=USER_A, name="Vault 1"))
        second = await vaults.create(Vault(user_id=USER_A, name="Vault 2"))
        await vaults.create(Vault(user_id=USER_B, name="Bob's"))

        # força timestamps distintos
        base = datetime(2024, 1, 1)
        async with sessions() as db:
            await db.execute(update(Vault).where(Vault.id == first.id).values(created_at=base))
            await db.execute(
                update(Vault).where(Vault.id == second.id).values(created_at=base + timedelta(hours=1))
            )
            await db.commit()

        listed = await vaults.list_by_user(USER_A)
        assert [v.id for v in listed] == [second.id, first.id]

    async def test_list_empty(self, vaults, known_users):
        assert await vaults.list_by_user(USER_A) == []


class TestUpdate:
    async def test_updates_name_and_description(self, vaults, vault_a):
        before = vault_a.updated_at
        vault_a.name = "Updated Name"
        vault_a.description = "Updated Description"
        updated = await vaults.update(vault_a)
        assert updated is not None
        assert updated.updated_at >= before

        loaded = await vaults.get_by_id(vault_a.id)
        assert loaded.name == "Updated Name"
        assert loaded.description == "Updated Description"

    async def test_does_not_touch_encrypted_key(self, vaults, vault_a):
        vault_a.encrypted_key = b"tampered"
        vault_a.name = "Renamed"
        await vaults.update(vault_a)
        loaded = await vaults.get_by_id(vault_a.id)
        assert loaded.encrypted_key == b"k-a"
        assert loaded.name == "Renamed"

    async def test_missing_returns_none(self, vaults, known_users):
        ghost = Vault(id="missing", user_id=USER_A, name="x")
        assert await vaults.update(ghost) is None


class TestDelete:
    async def test_delete(self, vaults, vault_a):
        assert await vaults.delete(vault_a.id) is True
        assert await vaults.get_by_id(vault_a.id) is None

    async def test_delete_missing(self, vaults, known_users):
        assert await vaults.delete("missing") is False

    async def test_cascades_to_secrets_and_metadata(self, vaults, secrets, sessions, vault_a, vault_b):
        created = [await secrets.create(*new_secret(vault_a.id, f"S{i}")) for i in range(3)]
        kept = await secrets.create(*new_secret(vault_b.id, "Other"))

        await vaults.delete(vault_a.id)

        for record in created:
            assert await secrets.get_by_id(record.secret.id) is None
        assert await secrets.get_by_id(kept.secret.id) is not None

        async with sessions() as db:
            assert await db.scalar(select(func.count()).select_from(Secret)) == 1
            assert await db.scalar(select(func.count()).select_from(SecretMetadata)) == 1


class TestUsers:
    async def test_ensure_is_idempotent(self, users):
        await users.ensure(USER_A, "alice@example.com")
        first = await users.get_by_id(USER_A)
        await users.ensure(USER_A, "alice@example.com")
        again = await users.get_by_id(USER_A)

        assert again.email == "alice@example.com"
        assert again.created_at == first.created_at
        assert again.last_seen_at >= first.last_seen_at

    async def test_unknown_user(self, users):
        assert await users.get_by_id("ghost") is None
