"""
HTTP layer of the CRM.

Versioned routers live in subpackages such as ``v1``; the dependency
providers shared by every version are in ``dependencies``.
"""
