from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """
    DRF token authentication using the ``Authorization: Bearer <token>`` header.
    """
    keyword = "Bearer"
