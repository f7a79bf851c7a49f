from typing import TYPE_CHECKING, BinaryIO, Optional

import smart_open
from botocore.response import StreamingBody

from .s3 import CHUNK_SIZE, S3_URL_PREFIX
from .tagging import TagSet, tags_from_boto3, tags_to_query_string

if TYPE_CHECKING:
    # When type checking we want to use the third party package's stub
    from mypy_boto3_s3 import S3Client
else:
    # In production we want to avoid depending on a package which has no runtime impact
    S3Client = object  # pragma: no mutate

S3_BODY_KEY = "Body"
S3_TAG_SET_KEY = "TagSet"
MULTIPART_UPLOAD_CLIENT_METHOD = "S3.Client.create_multipart_upload"
# Empty objects are written with a single put_object call instead of a multipart upload
PUT_OBJECT_CLIENT_METHOD = "S3.Client.put_object"


class ObjectStore:
    """
    The handful of S3 operations a transfer needs.

    Writes to the CAT2 bucket can go through a separate client, for example one assuming a role in
    the account owning that bucket.
    """

    def __init__(self, client: S3Client, secondary_client: Optional[S3Client] = None):
        self.client = client
        self.secondary_client = client if secondary_client is None else secondary_client

    def get_tags(self, bucket: str, key: str) -> TagSet:
        response = self.client.get_object_tagging(Bucket=bucket, Key=key)
        return tags_from_boto3(response[S3_TAG_SET_KEY])

    def get_object(self, bucket: str, key: str) -> StreamingBody:
        return self.client.get_object(Bucket=bucket, Key=key)[S3_BODY_KEY]

    def put_object(  # pylint:disable=too-many-arguments
        self, bucket: str, key: str, body: BinaryIO, tags: TagSet, content_length: int
    ) -> None:
        self.secondary_client.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentLength=content_length,
            Tagging=tags_to_query_string(tags),
        )

    def stream_object(self, body: StreamingBody, bucket: str, key: str, tags: TagSet) -> None:
        tagging = {"Tagging": tags_to_query_string(tags)}
        with smart_open.open(
            f"{S3_URL_PREFIX}{bucket}/{key}",
            mode="wb",
            transport_params={
                "client": self.client,
                "client_kwargs": {
                    MULTIPART_UPLOAD_CLIENT_METHOD: tagging,
                    PUT_OBJECT_CLIENT_METHOD: tagging,
                },
            },
        ) as target_file:
            for chunk in body.iter_chunks(chunk_size=CHUNK_SIZE):
                target_file.write(chunk)

    def delete_object(self, bucket: str, key: str) -> None:
        self.client.delete_object(Bucket=bucket, Key=key)
