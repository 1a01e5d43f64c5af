"""Current-user resolution.

Authentication lives outside this service. Requests are attributed to the
user id carried in the ``X-User-Id`` header (set by the upstream auth
proxy), or to the guest user when the header is absent.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

DEFAULT_USER_ID = 1


def get_auth_user(x_user_id: Annotated[str | None, Header()] = None) -> int:
    """Return the requesting user's id.

    Raises:
        HTTPException: 401 when the header is present but not a positive integer.
    """
    if x_user_id is None:
        return DEFAULT_USER_ID
    try:
        user_id = int(x_user_id)
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid X-User-Id header",
        )
    return user_id


CurrentUserDep = Annotated[int, Depends(get_auth_user)]
