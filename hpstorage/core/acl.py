"""
Translation between permission codes and container ACL headers.

Six permission codes are understood:

    pr, pw, prw   public read / write / both, for everyone
    r, w, rw      read / write / both, for a list of named users

Public codes map to fixed ACL entries and ignore the user list. Account
codes turn each user into a "<tenant>:<user>" entry. The tenant part is
always the wildcard for now.

Encoding and decoding are deliberately not symmetric: encoding renders a
missing list as an empty header value, while decoding keeps a missing
header as None. Servers and older clients depend on that, so keep it.
"""

from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence

from .errors import InvalidArgument


PUBLIC_PERMS = ("pr", "pw", "prw")
ACCOUNT_PERMS = ("r", "w", "rw")
VALID_PERMS = PUBLIC_PERMS + ACCOUNT_PERMS

PUBLIC_READ_ACL = (".r:*", ".rlistings")
PUBLIC_WRITE_ACL = ("*",)

# Tenant used in "<tenant>:<user>" entries.
ACL_TENANT_WILDCARD = "*"

READ_ACL_HEADER = "X-Container-Read"
WRITE_ACL_HEADER = "X-Container-Write"


class AclHeaderPair(NamedTuple):
    """Read and write ACL lists; None means the header was absent."""
    read_acl: Optional[list[str]]
    write_acl: Optional[list[str]]


def perm_to_acl(perm: str, users: Optional[Sequence[str]] = None) -> AclHeaderPair:
    """
    Convert a permission code and user list into read/write ACL lists.

    Raises InvalidArgument for an unknown code. An account code with no
    users gives two empty lists.
    """
    if perm not in VALID_PERMS:
        raise InvalidArgument(
            f"permission must be one of [{', '.join(VALID_PERMS)}]"
        )

    read_acl: list[str] = []
    write_acl: list[str] = []

    if perm in PUBLIC_PERMS:
        if "r" in perm:
            read_acl = list(PUBLIC_READ_ACL)
        if "w" in perm:
            write_acl = list(PUBLIC_WRITE_ACL)
    elif users:
        entries = [f"{ACL_TENANT_WILDCARD}:{user}" for user in users]
        if "r" in perm:
            read_acl = list(entries)
        if "w" in perm:
            write_acl = list(entries)

    return AclHeaderPair(read_acl, write_acl)


def perm_acl_to_header(
    read_acl: Optional[Sequence[str]],
    write_acl: Optional[Sequence[str]],
) -> dict[str, str]:
    """Render ACL lists as headers. Both keys are always present."""
    return {
        READ_ACL_HEADER: ",".join(read_acl or ()),
        WRITE_ACL_HEADER: ",".join(write_acl or ()),
    }


def header_to_perm_acl(
    read_header: Optional[str] = None,
    write_header: Optional[str] = None,
) -> AclHeaderPair:
    """Parse ACL header values back into lists; absent stays None."""
    return AclHeaderPair(_split_header(read_header), _split_header(write_header))


def _split_header(value: Optional[str]) -> Optional[list[str]]:
    if value is None:
        return None
    entries = value.split(",")
    # trailing empty fields are dropped, so "" decodes to []
    while entries and not entries[-1]:
        entries.pop()
    return entries


@dataclass(frozen=True)
class PermissionDescriptor:
    """A permission code together with the users it applies to."""
    perm: str
    users: Sequence[str] = field(default_factory=tuple)

    def to_acl(self) -> AclHeaderPair:
        return perm_to_acl(self.perm, self.users)

    def to_headers(self) -> dict[str, str]:
        return perm_acl_to_header(*self.to_acl())
