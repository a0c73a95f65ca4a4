"""Client for the cryptography service that encrypts the stored SMTP password."""

import logging
from typing import Protocol

import httpx

from notifier.config import get_settings
from notifier.exceptions import InternalException

logger = logging.getLogger(__name__)
settings = get_settings()


class CredentialCipher(Protocol):
    """Encrypt/decrypt capability used for the SMTP password."""

    async def encrypt(self, plaintext: str) -> str: ...

    async def decrypt(self, ciphertext: str) -> str: ...


class CryptographyServiceClient:
    """CredentialCipher backed by the cryptography service's HTTP API.

    One pooled ``httpx.AsyncClient`` is shared by all in-flight requests.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client (connections are opened lazily)."""
        self.base_url = base_url or settings.cryptography_service_url
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else settings.cryptography_service_timeout,
            transport=transport,
        )

    async def _call(self, operation: str, payload: dict[str, str], result_field: str) -> str:
        """POST to an operation endpoint and extract one string field from the reply."""
        try:
            response = await self._client.post(f"/{operation}", json=payload)
            response.raise_for_status()
            value = response.json()[result_field]
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Cryptography service {operation} failed: "
                f"{e.response.status_code} - {e.response.text}"
            )
            raise InternalException(f"Cryptography service {operation} failed") from e
        except httpx.HTTPError as e:
            logger.error(f"Cryptography service {operation} request error: {e}")
            raise InternalException(f"Cryptography service {operation} failed: {e}") from e
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Cryptography service {operation} returned a malformed reply: {e}")
            raise InternalException(f"Cryptography service {operation} returned a malformed reply") from e

        if not isinstance(value, str):
            raise InternalException(f"Cryptography service {operation} returned a malformed reply")
        return value

    async def encrypt(self, plaintext: str) -> str:
        """Encrypt a secret and return its ciphertext."""
        return await self._call("encrypt", {"plaintext": plaintext}, "ciphertext")

    async def decrypt(self, ciphertext: str) -> str:
        """Decrypt a ciphertext produced by ``encrypt``."""
        return await self._call("decrypt", {"ciphertext": ciphertext}, "plaintext")

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self._client.aclose()


# Singleton instance
_crypto_client: CryptographyServiceClient | None = None


def get_crypto_client() -> CryptographyServiceClient:
    """Get the cryptography service client singleton."""
    global _crypto_client
    if _crypto_client is None:
        _crypto_client = CryptographyServiceClient()
    return _crypto_client


async def close_crypto_client() -> None:
    """Close the singleton client if it was created."""
    global _crypto_client
    if _crypto_client is not None:
        await _crypto_client.aclose()
        _crypto_client = None
