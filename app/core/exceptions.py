from fastapi import HTTPException, status


class AppException:
    """Class-based exception handlers for common HTTP status codes."""

    @staticmethod
    def raise_400(message: str = "Bad Request"):
        """Raise a 400 Bad Request exception."""
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    @staticmethod
    def raise_404(message: str = "Not Found"):
        """Raise a 404 Not Found exception."""
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=message)

    @staticmethod
    def raise_413(message: str = "Payload Too Large"):
        """Raise a 413 Payload Too Large exception."""
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=message)

    @staticmethod
    def raise_500(message: str = "Internal Server Error"):
        """Raise a 500 Internal Server Error exception."""
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)
