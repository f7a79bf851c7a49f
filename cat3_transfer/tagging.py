from typing import TYPE_CHECKING, Iterable, List, NamedTuple, Tuple
from urllib.parse import urlencode

if TYPE_CHECKING:
    from mypy_boto3_s3.type_defs import TagTypeDef
else:
    TagTypeDef = dict  # pragma: no mutate


class Tag(NamedTuple):
    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


TagSet = Tuple[Tag, ...]

CAT3_BUNDLE_TAG = Tag("CAT3-BUNDLE", "TRUE")
VOLTRON_PROCESSING_TAG_KEY = "VOLTRON-PROCESSING"
VOLTRON_PROCESSING_SUCCESS_VALUE = "SUCCESS"


def tag_exists(tags: Iterable[Tag], key: str, expected_value: str) -> bool:
    return any(tag.key == key and tag.value == expected_value for tag in tags)


def with_tag(tags: TagSet, tag: Tag) -> TagSet:
    """Copy of `tags` with `tag` appended, unless an identical tag is already present."""
    if tag_exists(tags, tag.key, tag.value):
        return tuple(tags)
    return (*tags, tag)


def tags_from_boto3(tag_set: Iterable[TagTypeDef]) -> TagSet:
    return tuple(Tag(tag["Key"], tag["Value"]) for tag in tag_set)


def tags_to_query_string(tags: Iterable[Tag]) -> str:
    """`Tagging` parameter of S3 uploads. Duplicate keys are kept as they are."""
    return urlencode([(tag.key, tag.value) for tag in tags])


def format_tags(tags: Iterable[Tag]) -> List[str]:
    return [str(tag) for tag in tags]
