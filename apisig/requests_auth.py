import requests.auth

from .sigv4 import Signer

__all__ = ["ApiGatewayAuth"]


class ApiGatewayAuth(requests.auth.AuthBase):
    def __init__(self, signer: Signer) -> None:
        """
        Authentication hook for requests. Pass it as the auth argument of the
        requests methods, or assign it to a session's auth property.

        :param signer: The configured signer used for every request.
        """
        self.signer = signer

    def __call__(self, request: requests.PreparedRequest) -> requests.PreparedRequest:
        self.signer.apply(request.headers)
        return request
