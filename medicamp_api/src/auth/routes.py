from fastapi import APIRouter, Depends, Response

from ...middlewares.jwt_auth import JWTAuthController, get_jwt_auth
from .schema import TokenRequest, TokenResponse

router = APIRouter(tags=["Authentication"])


@router.post("/jwt", response_model=TokenResponse)
async def issue_token(
    body: TokenRequest,
    response: Response,
    jwt_auth: JWTAuthController = Depends(get_jwt_auth),
):
    """Sign an access token for an already authenticated identity and set it as a cookie"""
    token = jwt_auth.create_access_token({"email": body.email})
    jwt_auth.set_auth_cookie(response, token)
    return TokenResponse(token=token)


@router.post("/logout")
async def logout(response: Response, jwt_auth: JWTAuthController = Depends(get_jwt_auth)):
    jwt_auth.clear_auth_cookie(response)
    return {"success": True}
