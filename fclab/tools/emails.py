import json
from typing import Literal

from pydantic import BaseModel, Field

from ..Tool import Tool

_FUTURE_OF_AI = {
    "subject": "Re: [New] The Future of AI",
    "from": "John Doe <john.doe@example.com>",
    "date": "2023-01-01 12:00:00",
}

# (search fragment, inbox) -> number of matching messages
MOCK_INBOX = {
    ("tecnologia", "read"): 2,
    ("tecnologia", "unread"): 3,
}


def get_emails(search: str, inbox: str = "unread") -> str:
    """
    Mock inbox search.

    Returns:
        JSON string {"search", "inbox", "emails": [...]}; searches with no
        mock data report inbox "unknown" and no emails.
    """
    lowered = search.lower()
    for (fragment, box), count in MOCK_INBOX.items():
        if fragment in lowered and inbox == box:
            return json.dumps(
                {"search": search, "inbox": inbox, "emails": [dict(_FUTURE_OF_AI) for _ in range(count)]},
                ensure_ascii=False,
            )

    return json.dumps({"search": search, "inbox": "unknown", "emails": []}, ensure_ascii=False)


class GetEmailsInput(BaseModel):
    search: str = Field(
        min_length=1,
        description="Query to search for",
    )
    inbox: Literal["unread", "read", "starred", "unstarred"] = Field(
        default="unread",
        description="Inbox (unread, read, starred, unstarred)",
    )


class GetEmailsTool(Tool):
    name: str = "get_emails"
    description: str = "Gets the emails of a given inbox"

    def __init__(self, **kwargs):
        super().__init__(**kwargs, input_schema=GetEmailsInput, impl=self)

    def run(self, input: GetEmailsInput) -> str:
        return get_emails(input.search, input.inbox)
