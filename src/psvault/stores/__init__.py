from psvault.stores.audit_store import AuditSink
from psvault.stores.device_store import DeviceRegistry
from psvault.stores.secret_store import SecretFilter, SecretRecord, SecretStore
from psvault.stores.user_store import UserStore
from psvault.stores.vault_store import VaultStore

__all__ = [
    "AuditSink",
    "DeviceRegistry",
    "SecretFilter",
    "SecretRecord",
    "SecretStore",
    "UserStore",
    "VaultStore",
]
