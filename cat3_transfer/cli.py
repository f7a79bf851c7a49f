import sys
from enum import IntEnum
from typing import Callable, TypeVar

from botocore.exceptions import NoRegionError
from typer import Option, Typer, secho
from typer.colors import GREEN, RED, YELLOW

from .exceptions import ConfigurationError, TagRetrievalError
from .routing import RoutingAction
from .settings import TransferSettings
from .transfer import (
    FAILURE_OUTCOMES,
    ObjectRef,
    TransferOrchestrator,
    TransferOutcome,
    get_transfer_orchestrator,
)

BUCKET_HELP = "Name of the bucket holding the bundle."
KEY_HELP = "Key of the bundle, for example 'CAT3_BUNDLE/bundle.zip'."

ResultType = TypeVar("ResultType")

app = Typer(
    context_settings=dict(max_content_width=sys.maxsize),
    help="Route CAT3 bundles to the Voltron or CAT2 buckets.",
)


class ExitCode(IntEnum):
    SUCCESS = 0
    TRANSFER_FAILURE = 1
    # Exit code 2 is used by Typer to indicate usage error
    CONFIGURATION_ERROR = 3
    NO_REGION_SETTING = 5
    TAG_RETRIEVAL_FAILURE = 6


@app.command(name="run", help="Decide what to do with a bundle and do it.")
def run(
    bucket: str = Option(..., help=BUCKET_HELP), key: str = Option(..., help=KEY_HELP)
) -> None:
    def run_orchestrator(orchestrator: TransferOrchestrator) -> TransferOutcome:
        return orchestrator.run(ObjectRef(bucket, key))

    outcome = invoke_orchestrator(run_orchestrator)

    if outcome in FAILURE_OUTCOMES:
        secho(outcome.value, err=True, fg=RED)
        sys.exit(ExitCode.TRANSFER_FAILURE)

    secho(outcome.value, fg=GREEN)
    sys.exit(ExitCode.SUCCESS)


@app.command(name="decide", help="Print the action which would be taken, without taking it.")
def decide(
    bucket: str = Option(..., help=BUCKET_HELP), key: str = Option(..., help=KEY_HELP)
) -> None:
    def get_action(orchestrator: TransferOrchestrator) -> RoutingAction:
        return orchestrator.get_action(ObjectRef(bucket, key))

    action = invoke_orchestrator(get_action)
    secho(action.value, fg=GREEN)
    sys.exit(ExitCode.SUCCESS)


def invoke_orchestrator(function: Callable[[TransferOrchestrator], ResultType]) -> ResultType:
    try:
        return function(get_transfer_orchestrator(TransferSettings.from_environment()))
    except NoRegionError:
        secho(
            "Unable to locate region settings. Make sure to log in to AWS first.",
            err=True,
            fg=YELLOW,
        )
        sys.exit(ExitCode.NO_REGION_SETTING)
    except ConfigurationError as error:
        secho(str(error), err=True, fg=YELLOW)
        sys.exit(ExitCode.CONFIGURATION_ERROR)
    except TagRetrievalError as error:
        secho(str(error), err=True, fg=RED)
        sys.exit(ExitCode.TAG_RETRIEVAL_FAILURE)


if __name__ == "__main__":
    app()
