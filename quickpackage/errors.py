from __future__ import annotations


class QuickPackageError(Exception):
    def __init__(self, http_status: int, code: str, message: str):
        super().__init__(message)
        self.http_status = http_status
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


class PreconditionFailure(QuickPackageError):
    """The root item could not be resolved at build time."""

    def __init__(self, message: str = "Item not found"):
        super().__init__(http_status=404, code="ITEM_NOT_FOUND", message=message)


class QueryFailure(QuickPackageError):
    def __init__(self, message: str = "Descendant query failed"):
        super().__init__(http_status=500, code="QUERY_FAILED", message=message)


class WriteFailure(QuickPackageError):
    """The package writer or generator raised while serializing."""

    def __init__(self, message: str = "Package could not be written"):
        super().__init__(http_status=500, code="WRITE_FAILED", message=message)


class PackageExistsError(QuickPackageError):
    def __init__(self, message: str = "Package already exists"):
        super().__init__(http_status=409, code="PACKAGE_EXISTS", message=message)


class InvalidPackageName(QuickPackageError):
    def __init__(self, message: str = "Package name is not a valid file name"):
        super().__init__(http_status=400, code="INVALID_PACKAGE_NAME", message=message)


class AccountNotFound(QuickPackageError):
    def __init__(self, message: str = "Account not found"):
        super().__init__(http_status=404, code="ACCOUNT_NOT_FOUND", message=message)
