from dataclasses import dataclass
from enum import Enum
from io import BytesIO
from typing import BinaryIO, Callable, Optional, Union

from botocore.exceptions import BotoCoreError, ClientError
from botocore.response import StreamingBody
from linz_logger import get_log

from .encryption import EncryptionStage, Encryptor, GpgEncryptor
from .exceptions import ConfigurationError, TagRetrievalError
from .file_patterns import get_file_name, load_patterns
from .logging_keys import (
    LOG_MESSAGE_ACTION_DECIDED,
    LOG_MESSAGE_RESOURCE_RELEASE_FAILURE,
    LOG_MESSAGE_SOURCE_DELETED,
    LOG_MESSAGE_SOURCE_DELETION_FAILURE,
    LOG_MESSAGE_TAG_RETRIEVAL_FAILURE,
    LOG_MESSAGE_TAGS_PRESENT,
    LOG_MESSAGE_TRANSFER_COMPLETE,
    LOG_MESSAGE_TRANSFER_FAILURE,
    LOG_MESSAGE_TRANSFER_SIZE,
    LOG_MESSAGE_TRANSFER_START,
)
from .object_store import ObjectStore
from .routing import RoutingAction, decide
from .s3 import get_s3_client, get_secondary_s3_client
from .settings import (
    GPG_PUBLIC_KEY_VARIABLE_NAME,
    PRIMARY_BUCKET_VARIABLE_NAME,
    PRIMARY_PREFIX_VARIABLE_NAME,
    SECONDARY_BUCKET_VARIABLE_NAME,
    TransferSettings,
    require,
)
from .tagging import CAT3_BUNDLE_TAG, TagSet, format_tags, with_tag

SECONDARY_KEY_PREFIX = "ASVAWSIMAGING/CAT3_BUNDLE/"
LARGE_FILE_THRESHOLD_MB = 500

LOGGER = get_log()


class TransferOutcome(Enum):
    PRIMARY_SUCCESS = "Success: Bundle Encrypted and Moved to Voltron Bucket"
    PRIMARY_FAILURE = "Failure: Bundle Failed During Encryption / Move to Voltron Bucket"
    SECONDARY_SUCCESS = "Success: Bundle Moved to CAT2 Bucket"
    SECONDARY_FAILURE = "Failure: Bundle Failed During Move to CAT2 Bucket"
    NO_ACTION_TAKEN = "No Action Taken."


FAILURE_OUTCOMES = frozenset([TransferOutcome.PRIMARY_FAILURE, TransferOutcome.SECONDARY_FAILURE])


@dataclass(frozen=True)
class ObjectRef:
    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


EncryptionStageFactory = Callable[[TransferSettings], EncryptionStage]


def get_gpg_encryptor(public_key: Optional[str]) -> Encryptor:
    """The key is only required once something actually needs encrypting."""

    def encrypt(stream: BinaryIO) -> bytes:
        return GpgEncryptor(require(public_key, GPG_PUBLIC_KEY_VARIABLE_NAME))(stream)

    return encrypt


def get_encryption_stage(settings: TransferSettings) -> EncryptionStage:
    return EncryptionStage(
        load_patterns(settings.encryption_exclusion_patterns_path),
        get_gpg_encryptor(settings.gpg_public_key),
    )


class TransferOrchestrator:
    def __init__(
        self,
        settings: TransferSettings,
        object_store: ObjectStore,
        encryption_stage_factory: EncryptionStageFactory = get_encryption_stage,
    ):
        self.settings = settings
        self.object_store = object_store
        self.encryption_stage_factory = encryption_stage_factory

    def get_action(self, source: ObjectRef) -> RoutingAction:
        return self._decide(source, self._get_tags(source))

    def run(self, source: ObjectRef) -> TransferOutcome:
        tags = self._get_tags(source)
        action = self._decide(source, tags)

        if action is RoutingAction.ROUTE_TO_PRIMARY_DESTINATION:
            return self.move_to_primary_destination(source, tags)
        if action is RoutingAction.ROUTE_TO_SECONDARY_DESTINATION:
            return self.copy_to_secondary_destination(source, tags)
        return TransferOutcome.NO_ACTION_TAKEN

    def move_to_primary_destination(self, source: ObjectRef, tags: TagSet) -> TransferOutcome:
        """
        Stream the raw object to the Voltron bucket, then delete the source.

        The source is only deleted once the copy has completed. A failed delete is logged but does
        not change the outcome, so the object may end up in both buckets.
        """
        target = ObjectRef(
            require(self.settings.primary_bucket, PRIMARY_BUCKET_VARIABLE_NAME),
            require(self.settings.primary_prefix, PRIMARY_PREFIX_VARIABLE_NAME)
            + get_file_name(source.key),
        )
        target_tags = with_tag(tags, CAT3_BUNDLE_TAG)
        LOGGER.info(LOG_MESSAGE_TRANSFER_START, source=str(source), target=str(target))

        try:
            body = self.object_store.get_object(source.bucket, source.key)
            try:
                self.object_store.stream_object(body, target.bucket, target.key, target_tags)
            finally:
                body.close()
        except Exception as error:  # pylint:disable=broad-except
            LOGGER.error(LOG_MESSAGE_TRANSFER_FAILURE, source=str(source), error=str(error))
            return TransferOutcome.PRIMARY_FAILURE

        LOGGER.info(LOG_MESSAGE_TRANSFER_COMPLETE, source=str(source), target=str(target))
        self._delete_source(source)
        return TransferOutcome.PRIMARY_SUCCESS

    def copy_to_secondary_destination(self, source: ObjectRef, tags: TagSet) -> TransferOutcome:
        """Copy the object, encrypted unless excluded, to the CAT2 bucket. The source is kept."""
        file_name = get_file_name(source.key)
        target = ObjectRef(
            require(self.settings.secondary_bucket, SECONDARY_BUCKET_VARIABLE_NAME),
            f"{SECONDARY_KEY_PREFIX}{file_name}",
        )
        encryption_stage = self.encryption_stage_factory(self.settings)
        LOGGER.info(LOG_MESSAGE_TRANSFER_START, source=str(source), target=str(target))

        outcome = TransferOutcome.SECONDARY_SUCCESS
        content_length = 0
        body: Optional[StreamingBody] = None
        payload: Optional[BytesIO] = None
        try:
            body = self.object_store.get_object(source.bucket, source.key)
            contents = encryption_stage.prepare(source.key, body)
            content_length = len(contents)
            payload = BytesIO(contents)
            self.object_store.put_object(target.bucket, target.key, payload, tags, content_length)
        except ConfigurationError:
            raise
        except Exception as error:  # pylint:disable=broad-except
            LOGGER.error(LOG_MESSAGE_TRANSFER_FAILURE, source=str(source), error=str(error))
            outcome = TransferOutcome.SECONDARY_FAILURE
        finally:
            for resource in (payload, body):
                if resource is not None and not _release(resource, source):
                    outcome = TransferOutcome.SECONDARY_FAILURE

        if outcome is TransferOutcome.SECONDARY_SUCCESS:
            LOGGER.info(LOG_MESSAGE_TRANSFER_COMPLETE, source=str(source), target=str(target))
            log_transfer_size(file_name, content_length)
        return outcome

    def _get_tags(self, source: ObjectRef) -> TagSet:
        try:
            tags = self.object_store.get_tags(source.bucket, source.key)
        except (BotoCoreError, ClientError) as error:
            LOGGER.error(LOG_MESSAGE_TAG_RETRIEVAL_FAILURE, source=str(source), error=str(error))
            raise TagRetrievalError(f"Unable to fetch tags for “{source}”: {error}") from error

        LOGGER.info(LOG_MESSAGE_TAGS_PRESENT, source=str(source), tags=format_tags(tags))
        return tags

    def _decide(self, source: ObjectRef, tags: TagSet) -> RoutingAction:
        action = decide(
            source.key,
            tags,
            self.settings.policy_flag,
            load_patterns(self.settings.transfer_exclusion_patterns_path),
        )
        LOGGER.info(LOG_MESSAGE_ACTION_DECIDED, source=str(source), action=action.value)
        return action

    def _delete_source(self, source: ObjectRef) -> None:
        try:
            self.object_store.delete_object(source.bucket, source.key)
        except Exception as error:  # pylint:disable=broad-except
            LOGGER.error(LOG_MESSAGE_SOURCE_DELETION_FAILURE, source=str(source), error=str(error))
            return
        LOGGER.info(LOG_MESSAGE_SOURCE_DELETED, source=str(source))


def _release(resource: Union[BinaryIO, StreamingBody], source: ObjectRef) -> bool:
    try:
        resource.close()
    except Exception as error:  # pylint:disable=broad-except
        LOGGER.error(LOG_MESSAGE_RESOURCE_RELEASE_FAILURE, source=str(source), error=str(error))
        return False
    return True


def log_transfer_size(file_name: str, content_length: int) -> None:
    size_in_mb = content_length // 1024 // 1024
    LOGGER.info(
        LOG_MESSAGE_TRANSFER_SIZE,
        file_name=file_name,
        size_in_mb=size_in_mb,
        above_limit=size_in_mb > LARGE_FILE_THRESHOLD_MB,
        limit_in_mb=LARGE_FILE_THRESHOLD_MB,
    )


def get_transfer_orchestrator(settings: TransferSettings) -> TransferOrchestrator:
    object_store = ObjectStore(
        get_s3_client(), get_secondary_s3_client(settings.secondary_role_arn)
    )
    return TransferOrchestrator(settings, object_store)
