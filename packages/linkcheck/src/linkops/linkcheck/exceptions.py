"""Link check exception hierarchy"""


class LinkCheckError(Exception):
    """Base exception of the linkcheck package"""

    def __init__(self, url: str, message: str) -> None:
        """
        Args:
            url: probed URL
            message: error description
        """
        super().__init__(message)
        self.url = url


class LinkUnreachableError(LinkCheckError):
    """Connection failure, timeout, DNS failure or invalid URL

    The checker reports the link as dead instead of propagating.
    """

    def __init__(self, url: str, original_error: Exception) -> None:
        super().__init__(url, f"link unreachable: {url} -- {original_error}")
        self.original_error = original_error
