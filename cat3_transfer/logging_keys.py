LOG_MESSAGE_LAMBDA_START = "Lambda:Start"
LOG_MESSAGE_LAMBDA_FAILURE = "Lambda:Failure"
LOG_MESSAGE_LAMBDA_COMPLETE = "Lambda:Complete"
LOG_MESSAGE_TAGS_PRESENT = "Bundle:TagsPresent"
LOG_MESSAGE_TAG_RETRIEVAL_FAILURE = "Bundle:TagRetrievalFailure"
LOG_MESSAGE_ACTION_DECIDED = "Bundle:ActionDecided"
LOG_MESSAGE_TRANSFER_START = "Transfer:Start"
LOG_MESSAGE_TRANSFER_COMPLETE = "Transfer:Complete"
LOG_MESSAGE_TRANSFER_FAILURE = "Transfer:Failure"
LOG_MESSAGE_TRANSFER_SIZE = "Transfer:Size"
LOG_MESSAGE_ENCRYPTION_SKIPPED = "Encryption:Skipped"
LOG_MESSAGE_ENCRYPTION_START = "Encryption:Start"
LOG_MESSAGE_PAYLOAD_READY = "Encryption:PayloadReady"
LOG_MESSAGE_RESOURCE_RELEASE_FAILURE = "Transfer:ResourceReleaseFailure"
LOG_MESSAGE_SOURCE_DELETED = "Transfer:SourceDeleted"
LOG_MESSAGE_SOURCE_DELETION_FAILURE = "Transfer:SourceDeletionFailure"
LOG_MESSAGE_CONFIGURATION_FAILURE = "Configuration:Failure"
