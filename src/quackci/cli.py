"""quackci CLI - trigger a CI pipeline, wait for it, collect artifacts and logs."""

from __future__ import annotations

import sys

import click
from pydantic import ValidationError

from quackci import __version__
from quackci.core.config import load_config
from quackci.core.enums import ExitCode
from quackci.core.exceptions import ConfigurationError, QuackError
from quackci.core.logging import configure_logging
from quackci.orchestration.runner import PipelineRunner


@click.group()
@click.version_option(__version__, prog_name="quackci")
def cli():
    """Drive a CI pipeline run end to end."""


@cli.command()
@click.option("--org", envvar="CIRCLECI_ORG", help="CI organization name")
@click.option("--token", envvar="CIRCLECI_TOKEN", help="CI API token")
@click.option(
    "--repository",
    envvar=["QUACKCI_REPO", "GITHUB_REPOSITORY"],
    help="Repository, as 'name' or 'owner/name'",
)
@click.option(
    "--branch",
    envvar=["QUACKCI_BRANCH", "GITHUB_REF_NAME"],
    help="Branch to build (default: main)",
)
@click.option(
    "--get-logs",
    type=click.BOOL,
    default=None,
    help="Fetch step logs for every job: true or false (default: true)",
)
@click.option(
    "--work-dir",
    envvar=["QUACKCI_WORK_DIR", "GITHUB_WORKSPACE"],
    type=click.Path(file_okay=False),
    help="Directory receiving artifacts.json",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML config file")
@click.option("--log-level", help="DEBUG, INFO, WARNING, ERROR")
def run(org, token, repository, branch, get_logs, work_dir, config_path, log_level):
    """Trigger a pipeline and wait for its result.

    Exits 0 when every job succeeded, 1 when any job failed or errored, or
    when the run could not complete (trigger rejected, no workflows appeared,
    CI request failed).

    Every option can also come from a QUACKCI_* environment variable or a
    quackci.yaml file; inside GitHub Actions the branch, repository and
    workspace are picked up automatically.
    """
    try:
        config = load_config(
            config_path,
            org=org,
            token=token,
            repo=repository,
            branch=branch,
            get_logs=get_logs,
            work_dir=work_dir,
            log_level=log_level,
        )
    except ValidationError as e:
        click.echo(f"Error: invalid configuration: {e}", err=True)
        sys.exit(ExitCode.FAILURE)
    except (ConfigurationError, FileNotFoundError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(ExitCode.FAILURE)

    configure_logging(config.log_level)

    try:
        outcome = PipelineRunner(config, emit=click.echo).run()
    except QuackError as e:
        click.echo(f"Error: {e.message}", err=True)
        sys.exit(ExitCode.FAILURE)

    if outcome.failed:
        click.echo("One or more jobs failed in the CI pipeline.", err=True)
    else:
        click.echo("CI pipeline completed successfully.")
    sys.exit(int(outcome.exit_code))


def main():
    cli()


if __name__ == "__main__":
    main()
