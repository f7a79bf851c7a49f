from urllib.parse import parse_qsl

from cat3_transfer.tagging import (
    CAT3_BUNDLE_TAG,
    Tag,
    format_tags,
    tag_exists,
    tags_from_boto3,
    tags_to_query_string,
    with_tag,
)

from .aws_utils import any_tag, any_tags


def should_find_tag_with_expected_value() -> None:
    tag = any_tag()
    tags = (*any_tags(), tag)

    assert tag_exists(tags, tag.key, tag.value)


def should_not_find_tag_with_other_value() -> None:
    tag = any_tag()

    assert not tag_exists((tag,), tag.key, f"{tag.value}x")


def should_treat_missing_key_as_not_existing() -> None:
    assert not tag_exists((), "VOLTRON-PROCESSING", "SUCCESS")


def should_match_key_and_value_case_sensitively() -> None:
    tags = (Tag("VOLTRON-PROCESSING", "SUCCESS"),)

    assert not tag_exists(tags, "voltron-processing", "SUCCESS")
    assert not tag_exists(tags, "VOLTRON-PROCESSING", "success")


def should_find_any_occurrence_of_duplicate_key() -> None:
    tags = (Tag("VOLTRON-PROCESSING", "FAILED"), Tag("VOLTRON-PROCESSING", "SUCCESS"))

    assert tag_exists(tags, "VOLTRON-PROCESSING", "SUCCESS")


def should_append_missing_tag_to_copy() -> None:
    tags = any_tags()

    result = with_tag(tags, CAT3_BUNDLE_TAG)

    assert result == (*tags, CAT3_BUNDLE_TAG)
    assert CAT3_BUNDLE_TAG not in tags


def should_not_duplicate_existing_tag() -> None:
    tags = (*any_tags(), CAT3_BUNDLE_TAG)

    result = with_tag(with_tag(tags, CAT3_BUNDLE_TAG), CAT3_BUNDLE_TAG)

    assert result == tags
    assert result.count(CAT3_BUNDLE_TAG) == 1


def should_append_tag_when_key_has_another_value() -> None:
    tags = (Tag(CAT3_BUNDLE_TAG.key, "FALSE"),)

    assert with_tag(tags, CAT3_BUNDLE_TAG) == (Tag(CAT3_BUNDLE_TAG.key, "FALSE"), CAT3_BUNDLE_TAG)


def should_convert_boto3_tags() -> None:
    tag_set = [{"Key": "CAT3-BUNDLE", "Value": "TRUE"}, {"Key": "a", "Value": "b"}]

    assert tags_from_boto3(tag_set) == (Tag("CAT3-BUNDLE", "TRUE"), Tag("a", "b"))


def should_keep_duplicate_keys_in_query_string() -> None:
    tags = (Tag("a key", "first"), Tag("a key", "second&third"))

    query_string = tags_to_query_string(tags)

    assert parse_qsl(query_string) == [("a key", "first"), ("a key", "second&third")]


def should_format_tags_for_logging() -> None:
    assert format_tags((Tag("CAT3-BUNDLE", "TRUE"), Tag("a", "b"))) == ["CAT3-BUNDLE=TRUE", "a=b"]
