from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from ddm_api.client import DDMClient, create_ddm_client
from schemas.entities import Credentials

basic_auth = HTTPBasic(auto_error=False, realm="DDM Console")


def get_credentials(
    basic: HTTPBasicCredentials | None = Depends(basic_auth),
) -> Credentials | None:
    """Caller's HTTP Basic credentials, forwarded as-is to the backend."""
    if basic is None:
        return None
    return Credentials(username=basic.username, password=basic.password)


def get_ddm_client(
    credentials: Credentials | None = Depends(get_credentials),
) -> DDMClient:
    return create_ddm_client(credentials=credentials)
