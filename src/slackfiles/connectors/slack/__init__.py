"""Slack Web API access for the archiver."""
from slackfiles.connectors.slack.client import SlackClient, SlackApiError

__all__ = ["SlackClient", "SlackApiError"]
