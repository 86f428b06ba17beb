"""CLI entry point for review-notifier.

Commands:
  run      : run one notification cycle and message every pending reviewer
  pending  : list pending review requests without sending anything
"""

import logging

import click
import yaml

from . import __version__
from .config import AppConfig, ConfigManager
from .github.client import GitHubClient
from .github.gateway import PullRequestError, RepositoryError, RepositoryGateway
from .models.report import CycleReport, OutcomeStatus
from .notifier import Notifier
from .slack.client import SlackClient
from .slack.directory import DecodeError, IdentityDirectory


logger = logging.getLogger(__name__)


class ConfigurationError(click.ClickException):
    exit_code = 2


def load_config(config_path: str) -> AppConfig:
    """Load and validate configuration, configuring logging on the way."""
    try:
        return ConfigManager(AppConfig.load(config_path)).config
    except (ValueError, TypeError, FileNotFoundError, yaml.YAMLError) as e:
        raise ConfigurationError(str(e)) from e


def build_notifier(config: AppConfig) -> Notifier:
    """Wire the GitHub client, gateway, identity directory and Slack client."""
    try:
        directory = IdentityDirectory.load(config.slack.users_base64)
    except DecodeError as e:
        raise ConfigurationError(f"Invalid Slack users mapping ({e.stage}): {e}") from e

    client = GitHubClient(
        token=config.github.token,
        base_url=config.github.api_base_url,
        timeout=config.github.timeout_seconds,
        per_page=config.github.per_page,
    )
    gateway = RepositoryGateway(client, config.github.owner, config.github.repository)
    sender = SlackClient(
        token=config.slack.token,
        base_url=config.slack.api_base_url,
        timeout=config.slack.timeout_seconds,
    )
    return Notifier(
        gateway,
        directory,
        sender,
        message_template=config.notifier.message_template,
        reconcile_reviews=config.notifier.reconcile_reviews,
    )


def log_report(report: CycleReport) -> None:
    for error in report.errors:
        logger.error(str(error))
    for outcome in report.outcomes:
        if outcome.status == OutcomeStatus.SENT:
            logger.info(f"#{outcome.pr_number}: sent to {outcome.reviewer} ({outcome.slack_id})")
        elif outcome.status == OutcomeStatus.UNRESOLVED_IDENTITY:
            logger.warning(f"#{outcome.pr_number}: no Slack identity for {outcome.reviewer}")
        else:
            logger.error(f"#{outcome.pr_number}: {outcome.error}")


@click.group()
@click.version_option(version=__version__, prog_name="review-notifier")
@click.option(
    "--config",
    "config_path",
    default="review-notifier.yml",
    show_default=True,
    help="Path to the configuration file. Environment variables are used when it does not exist.",
    envvar="REVIEW_NOTIFIER_CONFIG",
)
@click.pass_context
def main(ctx: click.Context, config_path: str):
    """Notify reviewers on Slack about pending GitHub review requests."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command("run")
@click.pass_context
def run_cmd(ctx: click.Context):
    """Run one notification cycle."""
    config = load_config(ctx.obj["config_path"])
    notifier = build_notifier(config)

    report = notifier.run_cycle()
    log_report(report)

    summary = report.summary()
    click.echo(
        f"{summary['repository']}: {summary['processed_pull_requests']} pull requests, "
        f"{summary['sent']} sent, {summary['unresolved_identity']} unresolved, "
        f"{summary['failed']} failed, {summary['errors']} errors"
    )
    if report.has_errors:
        ctx.exit(1)


@main.command("pending")
@click.pass_context
def pending_cmd(ctx: click.Context):
    """List pending review requests without notifying anyone."""
    config = load_config(ctx.obj["config_path"])
    notifier = build_notifier(config)

    try:
        pull_requests = notifier.gateway.list_open_pull_requests()
    except RepositoryError as e:
        raise click.ClickException(str(e)) from e

    failed = False
    for pull_request in pull_requests:
        try:
            pending = notifier.pending_requests(pull_request)
        except PullRequestError as e:
            click.echo(f"#{pull_request.number}: {e}", err=True)
            failed = True
            continue

        for request in pending:
            slack_id = notifier.directory.resolve(request.reviewer) or "-"
            click.echo(f"#{request.pr_number}\t{request.reviewer}\t{slack_id}")

    if failed:
        ctx.exit(1)
