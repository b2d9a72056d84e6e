"""Bearer-token authentication for customer-facing routes.

A missing or malformed ``Authorization`` header is a 401; a well-formed token
that fails verification (bad signature, expired) is a 403. Either way the
request stops here and the checkout never sees it.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, Request

from storefront.identity.tokens import AccessTokens, InvalidTokenError, TokenSettings


@lru_cache(maxsize=1)
def get_access_tokens() -> AccessTokens:
    return AccessTokens(TokenSettings.from_env())


def require_customer(request: Request, tokens: AccessTokens = Depends(get_access_tokens)) -> str:
    """Return the customer id carried by the request's bearer token."""
    header = request.headers.get("Authorization")
    if not header:
        raise HTTPException(status_code=401, detail="Missing access token", headers={"WWW-Authenticate": "Bearer"})

    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise HTTPException(status_code=401, detail="Malformed authorization header", headers={"WWW-Authenticate": "Bearer"})

    try:
        return tokens.verify(token.strip())
    except InvalidTokenError as exc:
        raise HTTPException(status_code=403, detail=str(exc)) from exc
