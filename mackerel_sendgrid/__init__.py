"""
Mackerel agent plugin that reports yesterday's SendGrid delivery stats.
"""

__version__ = "0.3.0"

USER_AGENT_NAME = "mackerel-plugin-sendgrid"


def user_agent() -> str:
    return f"{USER_AGENT_NAME}/{__version__}"
