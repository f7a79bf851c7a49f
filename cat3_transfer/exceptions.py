class TransferError(Exception):
    pass


class ConfigurationError(TransferError):
    pass


class TagRetrievalError(TransferError):
    pass


class EncryptionError(TransferError):
    pass
