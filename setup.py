"""
libotp setup script
"""
#=============================================================================
# init script env -- ensure cwd = root of source dir
#=============================================================================
import os
root_dir = os.path.abspath(os.path.join(__file__, ".."))
os.chdir(root_dir)

#=============================================================================
# imports
#=============================================================================
import re
from setuptools import setup, find_packages

#=============================================================================
# version string
#=============================================================================

# pull version string from libotp, without importing it
# (which would require the dependencies to already be installed)
with open(os.path.join(root_dir, "libotp", "__init__.py")) as fh:
    version = re.search(r'^__version__ = "([^"]+)"', fh.read(), re.M).group(1)

#=============================================================================
# static text
#=============================================================================
SUMMARY = "HOTP & TOTP one-time password library"

DESCRIPTION = """\
libotp generates and validates RFC 4226 (HOTP) and RFC 6238 (TOTP)
one-time passwords, as used by Google Authenticator and similar apps.

It provides immutable OTP configurations, constant-time token validation
with drift / skew windows, secure secret generation, ``otpauth://``
provisioning uris, and migration parameters for moving configurations
between authenticator apps.
"""

KEYWORDS = """\
otp hotp totp 2fa mfa authenticator
rfc4226 rfc6238 base32 otpauth
"""

CLASSIFIERS = """\
Intended Audience :: Developers
License :: OSI Approved :: BSD License
Natural Language :: English
Operating System :: OS Independent
Programming Language :: Python :: 3
Programming Language :: Python :: 3 :: Only
Programming Language :: Python :: Implementation :: CPython
Programming Language :: Python :: Implementation :: PyPy
Topic :: Security :: Cryptography
Topic :: Software Development :: Libraries
""".splitlines()

if '.dev' in version:
    CLASSIFIERS.append("Development Status :: 3 - Alpha")
elif '.post' in version:
    CLASSIFIERS.append("Development Status :: 4 - Beta")
else:
    CLASSIFIERS.append("Development Status :: 5 - Production/Stable")

#=============================================================================
# run setup
#=============================================================================
setup(
    # package info
    packages=find_packages(root_dir, include=["libotp", "libotp.*"]),
    zip_safe=True,

    # metadata
    name="libotp",
    version=version,
    license="BSD",

    description=SUMMARY,
    long_description=DESCRIPTION,
    keywords=KEYWORDS,
    classifiers=CLASSIFIERS,

    python_requires=">=3.10",
    install_requires=[
        "cryptography",
        "typing_extensions",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-archon",
        ],
    },
)

#=============================================================================
# eof
#=============================================================================
