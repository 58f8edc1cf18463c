from .logger import logger


class BaseCustomException(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Invalid config: {reason}")


class SecretNotFoundError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to load secret from env: {reason}")


class LeakedSecretError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Secret committed as a literal: {reason}")


class CompilerError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to verify compiler version: {reason}")


class NodeError(BaseCustomException):
    def __init__(self, reason: str):
        super().__init__(f"Failed to verify network: {reason}")


class ExceptionHandler:
    raise_exception = True

    @staticmethod
    def initialize(raise_exception: bool) -> None:
        ExceptionHandler.raise_exception = raise_exception

    @staticmethod
    def raise_exception_or_log(custom_exception: BaseCustomException) -> None:
        if ExceptionHandler.raise_exception:
            raise custom_exception
        logger.error(str(custom_exception))
