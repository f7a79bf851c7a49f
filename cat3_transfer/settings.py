from dataclasses import dataclass
from os import environ
from typing import Mapping, Optional

from .exceptions import ConfigurationError

POLICY_FLAG_VARIABLE_NAME = "TAG_BASED_ACTION"
SECONDARY_BUCKET_VARIABLE_NAME = "CAT_2_BUCKET"
SECONDARY_ROLE_ARN_VARIABLE_NAME = "CAT_2_S3_ROLE_ARN"
PRIMARY_BUCKET_VARIABLE_NAME = "VOLTRON_BUCKET"
PRIMARY_PREFIX_VARIABLE_NAME = "VOLTRON_PREFIX"
GPG_PUBLIC_KEY_VARIABLE_NAME = "GPG_PUBLIC_KEY"
ENCRYPTION_EXCLUSION_PATTERNS_VARIABLE_NAME = "ENCRYPTION_EXCLUSION_PATTERNS_FILE"
TRANSFER_EXCLUSION_PATTERNS_VARIABLE_NAME = "TRANSFER_EXCLUSION_PATTERNS_FILE"

ENCRYPTION_EXCLUSION_PATTERNS_PATH = "file_configs/file-pattern-ignore-encryption.json"
TRANSFER_EXCLUSION_PATTERNS_PATH = "file_configs/file-pattern-ignore-transfer.json"


def require(value: Optional[str], variable_name: str) -> str:
    if value is None:
        raise ConfigurationError(f"Missing required setting “{variable_name}”")
    return value


@dataclass(frozen=True)
class TransferSettings:
    # pylint:disable=too-many-instance-attributes
    policy_flag: str
    primary_bucket: Optional[str] = None
    primary_prefix: Optional[str] = None
    secondary_bucket: Optional[str] = None
    secondary_role_arn: Optional[str] = None
    gpg_public_key: Optional[str] = None
    encryption_exclusion_patterns_path: str = ENCRYPTION_EXCLUSION_PATTERNS_PATH
    transfer_exclusion_patterns_path: str = TRANSFER_EXCLUSION_PATTERNS_PATH

    @classmethod
    def from_environment(cls, variables: Mapping[str, str] = environ) -> "TransferSettings":
        """
        Read every setting once. Only the policy flag is required up front; the bucket settings
        are checked when the route needing them is selected.
        """
        return cls(
            policy_flag=require(
                variables.get(POLICY_FLAG_VARIABLE_NAME), POLICY_FLAG_VARIABLE_NAME
            ),
            primary_bucket=variables.get(PRIMARY_BUCKET_VARIABLE_NAME),
            primary_prefix=variables.get(PRIMARY_PREFIX_VARIABLE_NAME),
            secondary_bucket=variables.get(SECONDARY_BUCKET_VARIABLE_NAME),
            secondary_role_arn=variables.get(SECONDARY_ROLE_ARN_VARIABLE_NAME),
            gpg_public_key=variables.get(GPG_PUBLIC_KEY_VARIABLE_NAME),
            encryption_exclusion_patterns_path=variables.get(
                ENCRYPTION_EXCLUSION_PATTERNS_VARIABLE_NAME, ENCRYPTION_EXCLUSION_PATTERNS_PATH
            ),
            transfer_exclusion_patterns_path=variables.get(
                TRANSFER_EXCLUSION_PATTERNS_VARIABLE_NAME, TRANSFER_EXCLUSION_PATTERNS_PATH
            ),
        )
