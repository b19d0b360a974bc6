"""
Access token renewal.
"""

from ..adapters.backend_client import BackendClient
from ..adapters.rpc import RpcError
from ..models import RenewAccessTokenResponse
from .error_translator import Endpoint, ErrorTranslator


class TokenService:
    def __init__(self, backend: BackendClient, translator: ErrorTranslator):
        self.backend = backend
        self.translator = translator

    async def renew_access_token(self, refresh_token: str) -> RenewAccessTokenResponse:
        try:
            result = await self.backend.renew_access_token(refresh_token)
        except RpcError as exc:
            raise self.translator.translate(Endpoint.TOKEN_RENEW, exc) from exc

        return RenewAccessTokenResponse(
            access_token=result.access_token,
            access_expired_at=result.expired_at,
        )
