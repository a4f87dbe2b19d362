class MeepleError(Exception): pass

class InvalidIdFormatError(MeepleError): pass

class IdentityMismatchError(MeepleError): pass

class InvalidBorrowerError(MeepleError): pass

class EmptySelectionError(MeepleError): pass

class ItemNotFoundError(MeepleError):

    def __init__(self, token, message=None):
        self.token = token
        super().__init__(message or f"No catalog item matches '{token}'.")

class PasscodeError(MeepleError): pass


class LedgerError(MeepleError):
    """Base for anything the ledger gateway raises. `status` holds the
    ledger's status tag when one was received."""

    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)

class LedgerTransportError(LedgerError): pass

class LedgerRejectedError(LedgerError): pass

class BorrowBlockedError(LedgerRejectedError): pass

class ReturnNotFoundError(LedgerRejectedError): pass
