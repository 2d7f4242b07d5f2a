# Shared Common Library for the Airworthiness Ledger
# Authentication, permissions, exception handling, and other components
# shared by the ledger services.
#
# Settings modules import `common.constants` while Django is still being
# configured, so nothing here may import Django or DRF at package level.

__version__ = "1.0.0"

from .constants import (
    UserRole,
    API_PREFIX,
)

__all__ = [
    '__version__',
    'UserRole',
    'API_PREFIX',
]
