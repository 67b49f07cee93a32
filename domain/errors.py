class DomainError(Exception):
    code = "E_DOMAIN"
    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(DomainError):
    code = "E_INVALID_INPUT"
    status_code = 400


class ConfigurationError(DomainError):
    code = "E_NOT_CONFIGURED"
    status_code = 500


class AIUnavailableError(DomainError):
    code = "E_AI_UNAVAILABLE"
    status_code = 502


class ImageFetchError(DomainError):
    code = "E_IMAGE_FETCH"
    status_code = 502
