"""libotp -- HOTP (RFC 4226) and TOTP (RFC 6238) one-time passwords"""

from libotp.algorithms import Algorithm
from libotp.context import OTPContext
from libotp.hotp import HOTP
from libotp.migration import MigrationParameters, export_migration, import_migration
from libotp.totp import TOTP
from libotp.uri import parse_uri, provisioning_uri

__version__ = "1.0.0"

__all__ = [
    "Algorithm",
    "HOTP",
    "TOTP",
    "MigrationParameters",
    "OTPContext",
    "export_migration",
    "import_migration",
    "parse_uri",
    "provisioning_uri",
    "new",
    "from_uri",
]

#: context used by the module-level helpers below
default_context = OTPContext()

new = default_context.new
from_uri = default_context.from_uri
