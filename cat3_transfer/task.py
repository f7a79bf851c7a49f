from urllib.parse import unquote_plus

from jsonschema import ValidationError, validate
from linz_logger import get_log

from .exceptions import TransferError
from .logging_keys import (
    LOG_MESSAGE_LAMBDA_COMPLETE,
    LOG_MESSAGE_LAMBDA_FAILURE,
    LOG_MESSAGE_LAMBDA_START,
)
from .settings import TransferSettings
from .transfer import ObjectRef, get_transfer_orchestrator
from .types import JsonObject

RECORDS_KEY = "Records"
S3_KEY = "s3"
BUCKET_KEY = "bucket"
BUCKET_NAME_KEY = "name"
OBJECT_KEY = "object"
OBJECT_KEY_KEY = "key"

S3_NOTIFICATION_SCHEMA = {
    "type": "object",
    "properties": {
        RECORDS_KEY: {
            "type": "array",
            "minItems": 1,
            # S3 sends one record per notification
            "maxItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    S3_KEY: {
                        "type": "object",
                        "properties": {
                            BUCKET_KEY: {
                                "type": "object",
                                "properties": {BUCKET_NAME_KEY: {"type": "string"}},
                                "required": [BUCKET_NAME_KEY],
                            },
                            OBJECT_KEY: {
                                "type": "object",
                                "properties": {OBJECT_KEY_KEY: {"type": "string"}},
                                "required": [OBJECT_KEY_KEY],
                            },
                        },
                        "required": [BUCKET_KEY, OBJECT_KEY],
                    }
                },
                "required": [S3_KEY],
            },
        }
    },
    "required": [RECORDS_KEY],
}
DIRECT_INVOCATION_SCHEMA = {
    "type": "object",
    "properties": {BUCKET_KEY: {"type": "string"}, OBJECT_KEY_KEY: {"type": "string"}},
    "required": [BUCKET_KEY, OBJECT_KEY_KEY],
}

LOGGER = get_log()


def lambda_handler(event: JsonObject, _context: bytes) -> str:
    LOGGER.debug(LOG_MESSAGE_LAMBDA_START, lambda_input=event)

    try:
        validate(event, {"anyOf": [S3_NOTIFICATION_SCHEMA, DIRECT_INVOCATION_SCHEMA]})
    except ValidationError as error:
        LOGGER.warning(LOG_MESSAGE_LAMBDA_FAILURE, error=error.message)
        raise

    source = get_source(event)

    try:
        outcome = get_transfer_orchestrator(TransferSettings.from_environment()).run(source)
    except TransferError as error:
        LOGGER.error(LOG_MESSAGE_LAMBDA_FAILURE, source=str(source), error=str(error))
        raise

    LOGGER.info(LOG_MESSAGE_LAMBDA_COMPLETE, source=str(source), outcome=outcome.value)
    return outcome.value


def get_source(event: JsonObject) -> ObjectRef:
    if RECORDS_KEY in event:
        s3_details = event[RECORDS_KEY][0][S3_KEY]
        # Keys in S3 event notifications are URL encoded
        return ObjectRef(
            s3_details[BUCKET_KEY][BUCKET_NAME_KEY],
            unquote_plus(s3_details[OBJECT_KEY][OBJECT_KEY_KEY]),
        )
    return ObjectRef(event[BUCKET_KEY], event[OBJECT_KEY_KEY])
