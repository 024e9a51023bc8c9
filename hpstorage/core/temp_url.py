"""
Temporary URL signing.

A temp URL lets someone without a token GET, PUT or HEAD a single object
until an expiry time. The server recomputes the HMAC over

    "<METHOD>\\n<expires>\\n<path>/<container>/<object>"

and compares it with the `temp_url_sig` query parameter. The server
signs the *unescaped* path, so the signature must be computed from raw
container and object names even though the URL itself carries escaped
ones. Mixing the two up produces URLs that look fine and always 401.
"""

import hashlib
import hmac
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import InvalidArgument
from .models import Session
from .urls import escape


ALLOWED_TEMP_URL_METHODS = ("GET", "PUT", "HEAD")


@dataclass(frozen=True)
class SignedUrlRequest:
    """What to sign: which object, for how long, and for which verb."""
    container: Optional[str]
    obj: Optional[str]
    expires_secs: Optional[int]
    method: Optional[str] = "GET"


def sign(string_to_sign: str, secret_key: str) -> str:
    """Hex HMAC-SHA1 of `string_to_sign` keyed by `secret_key`."""
    return hmac.new(
        secret_key.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha1,
    ).hexdigest()


class TempUrlSigner:
    """
    Produces signed temp URLs for one storage endpoint and account.

    The clock is injectable so tests can pin `now`.
    """

    def __init__(
        self,
        storage_uri: str,
        secret_key: str,
        tenant_id: str,
        account_id: str,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._storage_uri = storage_uri
        self._secret_key = secret_key
        self._tenant_id = tenant_id
        self._account_id = account_id
        self._clock = clock

    def generate(
        self,
        container: Optional[str],
        obj: Optional[str],
        expires_secs: Optional[int],
        method: Optional[str],
    ) -> Optional[str]:
        """
        Build the temp URL, or return None if any input is missing.

        A missing input is not an error; an unsupported method is.
        """
        if container is None or obj is None or expires_secs is None or method is None:
            return None

        if method not in ALLOWED_TEMP_URL_METHODS:
            raise InvalidArgument(
                f"Invalid method '{method}' specified. "
                f"Valid methods are: {', '.join(ALLOWED_TEMP_URL_METHODS)}"
            )

        expires = int(self._clock()) + int(expires_secs)

        uri = Session.from_endpoint(self._storage_uri)

        sig_path = f"{uri.path}/{container}/{obj}"
        encoded_path = f"{uri.path}/{escape(container)}/{escape(obj)}"

        string_to_sign = f"{method}\n{expires}\n{sig_path}"
        signature = escape(
            f"{self._tenant_id}:{self._account_id}:"
            + sign(string_to_sign, self._secret_key)
        )

        return (
            f"{uri.base_url}{encoded_path}"
            f"?temp_url_sig={signature}&temp_url_expires={expires}"
        )

    def generate_for(self, request: SignedUrlRequest) -> Optional[str]:
        return self.generate(
            request.container, request.obj, request.expires_secs, request.method
        )


def generate_temp_url(
    storage_uri: str,
    secret_key: str,
    tenant_id: str,
    account_id: str,
    container: Optional[str],
    obj: Optional[str],
    expires_secs: Optional[int],
    method: Optional[str],
    clock: Callable[[], float] = time.time,
) -> Optional[str]:
    """One-shot form of TempUrlSigner.generate."""
    signer = TempUrlSigner(storage_uri, secret_key, tenant_id, account_id, clock=clock)
    return signer.generate(container, obj, expires_secs, method)
