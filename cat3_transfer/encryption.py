from functools import partial
from re import Pattern
from tempfile import TemporaryDirectory
from typing import BinaryIO, Callable, Iterable, Optional

import gnupg
from linz_logger import get_log

from .exceptions import EncryptionError
from .file_patterns import get_file_name, matches
from .logging_keys import (
    LOG_MESSAGE_ENCRYPTION_SKIPPED,
    LOG_MESSAGE_ENCRYPTION_START,
    LOG_MESSAGE_PAYLOAD_READY,
)
from .s3 import CHUNK_SIZE

Encryptor = Callable[[BinaryIO], bytes]

LOGGER = get_log()


class GpgEncryptor:
    """Encrypts streams for a single recipient, given as an ASCII-armored public key."""

    def __init__(self, public_key: str, gnupg_home: Optional[str] = None):
        if gnupg_home is None:
            # Lives as long as the encryptor; removed when it is garbage collected.
            self._home_directory: Optional[TemporaryDirectory[str]] = TemporaryDirectory()
            gnupg_home = self._home_directory.name
        else:
            self._home_directory = None

        self._gpg = gnupg.GPG(gnupghome=gnupg_home)
        import_result = self._gpg.import_keys(public_key)
        if not import_result.fingerprints:
            raise EncryptionError(f"Unable to import GPG public key: {import_result.results}")
        self.fingerprint: str = import_result.fingerprints[0]

    def __call__(self, stream: BinaryIO) -> bytes:
        result = self._gpg.encrypt_file(
            stream, recipients=[self.fingerprint], armor=False, always_trust=True
        )
        if not result.ok:
            raise EncryptionError(f"GPG encryption failed: {result.status}")
        encrypted: bytes = result.data
        return encrypted


class EncryptionStage:
    def __init__(self, encryption_exclusion_patterns: Iterable[Pattern[str]], encryptor: Encryptor):
        self.encryption_exclusion_patterns = tuple(encryption_exclusion_patterns)
        self.encryptor = encryptor

    def prepare(self, object_key: str, body: BinaryIO) -> bytes:
        """
        Return the payload to upload for `object_key`.

        Files matching an encryption exclusion pattern are already encrypted and are returned as
        read. Everything else goes through the encryptor. Either a complete payload is returned or
        the error raised while reading or encrypting propagates.
        """
        file_name = get_file_name(object_key)

        if matches(object_key, self.encryption_exclusion_patterns):
            LOGGER.info(LOG_MESSAGE_ENCRYPTION_SKIPPED, file_name=file_name)
            payload = read_all(body)
        else:
            LOGGER.info(LOG_MESSAGE_ENCRYPTION_START, file_name=file_name)
            payload = self.encryptor(body)
            if not isinstance(payload, bytes):
                raise EncryptionError(
                    f"Encryptor returned {type(payload).__name__} instead of bytes"
                )

        LOGGER.info(LOG_MESSAGE_PAYLOAD_READY, file_name=file_name, content_length=len(payload))
        return payload


def read_all(body: BinaryIO) -> bytes:
    return b"".join(iter(partial(body.read, CHUNK_SIZE), b""))
