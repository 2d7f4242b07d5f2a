"""
Shared Constants Module.

Constants shared by the ledger service and its clients.
"""
from enum import Enum

# =============================================================================
# SYSTEM CONSTANTS
# =============================================================================

# API Version
API_VERSION = "v1"
API_PREFIX = f"/api/{API_VERSION}"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

# Rate Limiting
RATE_LIMIT_ANONYMOUS = "100/hour"
RATE_LIMIT_AUTHENTICATED = "1000/hour"


# =============================================================================
# USER & AUTHENTICATION
# =============================================================================

class UserRole(str, Enum):
    """Roles recognised by the ledger's access checks."""
    ADMIN = "admin"
    MANAGER = "manager"
    INSPECTOR = "inspector"
    MECHANIC = "mechanic"
    PILOT = "pilot"


# JWT Token Settings
JWT_ACCESS_TOKEN_LIFETIME_MINUTES = 60
JWT_ALGORITHM = "HS256"
JWT_ISSUER = "airworthiness-ledger"
