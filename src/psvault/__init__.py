"""
psvault — cofres de segredos cifrados no cliente.

O servidor guarda vaults, secrets (payload opaco + metadata pesquisável),
devices e uma trilha de auditoria. Nunca decifra nada.
"""
__version__ = "1.0.0"
