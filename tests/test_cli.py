from os import environ
from unittest.mock import MagicMock, patch

from botocore.exceptions import NoRegionError
from pytest_subtests import SubTests
from typer.testing import CliRunner

from cat3_transfer.cli import ExitCode, app
from cat3_transfer.exceptions import ConfigurationError, TagRetrievalError
from cat3_transfer.routing import RoutingAction
from cat3_transfer.settings import POLICY_FLAG_VARIABLE_NAME
from cat3_transfer.transfer import ObjectRef, TransferOutcome

from .aws_utils import any_s3_bucket_name
from .general_generators import any_safe_file_path, any_safe_filename

CLI_RUNNER = CliRunner()


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "CAT2_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_successful_outcome(get_orchestrator_mock: MagicMock) -> None:
    bucket = any_s3_bucket_name()
    key = any_safe_file_path()
    get_orchestrator_mock.return_value.run.return_value = TransferOutcome.SECONDARY_SUCCESS

    result = CLI_RUNNER.invoke(app, ["run", "--bucket", bucket, "--key", key])

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert "Success: Bundle Moved to CAT2 Bucket" in result.output
    get_orchestrator_mock.return_value.run.assert_called_once_with(ObjectRef(bucket, key))


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "NONE"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_treat_no_action_as_success(get_orchestrator_mock: MagicMock) -> None:
    get_orchestrator_mock.return_value.run.return_value = TransferOutcome.NO_ACTION_TAKEN

    result = CLI_RUNNER.invoke(
        app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
    )

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert "No Action Taken." in result.output


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "VOLTRON_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_failure_outcomes(get_orchestrator_mock: MagicMock, subtests: SubTests) -> None:
    for outcome in [TransferOutcome.PRIMARY_FAILURE, TransferOutcome.SECONDARY_FAILURE]:
        with subtests.test(outcome=outcome):
            get_orchestrator_mock.return_value.run.return_value = outcome

            result = CLI_RUNNER.invoke(
                app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
            )

            assert result.exit_code == ExitCode.TRANSFER_FAILURE, result.output
            assert outcome.value in result.output


@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_missing_policy_flag(get_orchestrator_mock: MagicMock) -> None:
    with patch.dict(environ, clear=True):
        result = CLI_RUNNER.invoke(
            app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
        )

    assert result.exit_code == ExitCode.CONFIGURATION_ERROR, result.output
    assert POLICY_FLAG_VARIABLE_NAME in result.output
    get_orchestrator_mock.assert_not_called()


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "VOLTRON_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_configuration_error_during_run(get_orchestrator_mock: MagicMock) -> None:
    error_message = any_safe_filename()
    get_orchestrator_mock.return_value.run.side_effect = ConfigurationError(error_message)

    result = CLI_RUNNER.invoke(
        app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
    )

    assert result.exit_code == ExitCode.CONFIGURATION_ERROR, result.output
    assert error_message in result.output


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "CAT2_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_tag_retrieval_failure(get_orchestrator_mock: MagicMock) -> None:
    error_message = any_safe_filename()
    get_orchestrator_mock.return_value.run.side_effect = TagRetrievalError(error_message)

    result = CLI_RUNNER.invoke(
        app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
    )

    assert result.exit_code == ExitCode.TAG_RETRIEVAL_FAILURE, result.output
    assert error_message in result.output


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "CAT2_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_report_missing_region(get_orchestrator_mock: MagicMock) -> None:
    get_orchestrator_mock.side_effect = NoRegionError()

    result = CLI_RUNNER.invoke(
        app, ["run", "--bucket", any_s3_bucket_name(), "--key", any_safe_file_path()]
    )

    assert result.exit_code == ExitCode.NO_REGION_SETTING, result.output


@patch.dict(environ, {POLICY_FLAG_VARIABLE_NAME: "VOLTRON_COPY"})
@patch("cat3_transfer.cli.get_transfer_orchestrator")
def should_print_decided_action_without_transferring(get_orchestrator_mock: MagicMock) -> None:
    bucket = any_s3_bucket_name()
    key = any_safe_file_path()
    get_orchestrator_mock.return_value.get_action.return_value = (
        RoutingAction.ROUTE_TO_PRIMARY_DESTINATION
    )

    result = CLI_RUNNER.invoke(app, ["decide", "--bucket", bucket, "--key", key])

    assert result.exit_code == ExitCode.SUCCESS, result.output
    assert result.output.strip() == "VOLTRON_COPY"
    get_orchestrator_mock.return_value.get_action.assert_called_once_with(ObjectRef(bucket, key))
    get_orchestrator_mock.return_value.run.assert_not_called()
