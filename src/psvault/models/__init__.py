from psvault.models.user import User
from psvault.models.vault import Vault
from psvault.models.secret import Secret, SecretMetadata, SecretType
from psvault.models.device import Device
from psvault.models.audit_log import AuditAction, AuditLog

__all__ = [
    "User",
    "Vault",
    "Secret",
    "SecretMetadata",
    "SecretType",
    "Device",
    "AuditAction",
    "AuditLog",
]
