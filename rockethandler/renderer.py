"""
Message rendering for Rocket Handler.

Turns an event into the chat.postMessage payload: a templated
description, a status label and color, and one attachment.
"""

import jinja2
from jinja2.sandbox import ImmutableSandboxedEnvironment

from rockethandler.config import HandlerConfig
from rockethandler.core import Attachment, AttachmentField, Message
from rockethandler.errors import TemplateError
from rockethandler.event import Event

ATTACHMENT_TITLE = "Description"

# Status code -> (label, color); anything else is a warning
STATUS_STYLES: dict[int, tuple[str, str]] = {
    0: ("Resolved", "green"),
    2: ("Critical", "red"),
}
WARNING_STYLE = ("Warning", "orange")

# Templates may come from event annotations, so they only get the sandbox
_environment = ImmutableSandboxedEnvironment(
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)


def render_description(event: Event, template_source: str) -> str:
    """
    Render the description template against an event.

    Literal backslash-n sequences in the result become real line breaks,
    so check output that was escaped upstream displays on several lines.

    Raises:
        TemplateError: If the template does not parse, references an
            undefined name, touches unsafe attributes, or fails while running
    """
    try:
        template = _environment.from_string(template_source)
        description = template.render(event.template_context())
    except Exception as e:  # pylint: disable=broad-exception-caught
        raise TemplateError(f"Error processing template: {e}") from e

    return description.replace("\\n", "\n")


def classify(event: Event) -> tuple[str, str]:
    """Map the check status to a (label, color) pair."""
    return STATUS_STYLES.get(event.check.status, WARNING_STYLE)


def build_payload(
    event: Event,
    config: HandlerConfig,
    is_bot: bool,
    description: str = ""
) -> Message:
    """
    Assemble the message for an event.

    Alias and avatar are only set for bot accounts; the service ignores
    them for anyone else.
    """
    label, color = classify(event)

    attachment = Attachment(
        title=ATTACHMENT_TITLE,
        color=color,
        text=description,
        fields=[
            AttachmentField(title="Status", value=label, short=False),
            AttachmentField(title="Entity", value=event.entity.name, short=True),
            AttachmentField(title="Check", value=event.check.name, short=True),
        ],
    )

    message = Message(channel=config.channel, attachments=[attachment])
    if is_bot:
        message.alias = config.alias
        message.avatar = config.avatar
    return message
