"""Token accounting for rename requests."""

from dataclasses import dataclass


# Filenames are dense with punctuation and digits, so assume ~3 characters per token
CHARS_PER_TOKEN = 3


def estimate_tokens(text: str) -> int:
    """Rough token count for providers that report no usage metadata."""
    return len(text) // CHARS_PER_TOKEN


@dataclass
class TokenUsage:
    """Tokens spent on the requests of one run.

    Counts come from the provider's usage metadata when a reply carries it and
    are estimated from the text length otherwise.
    """

    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0
    estimated_requests: int = 0

    def record(self, usage_metadata: dict | None, prompt_text: str, reply_text: str) -> None:
        if usage_metadata:
            self.input_tokens += usage_metadata.get("input_tokens", 0)
            self.output_tokens += usage_metadata.get("output_tokens", 0)
        else:
            self.input_tokens += estimate_tokens(prompt_text)
            self.output_tokens += estimate_tokens(reply_text)
            self.estimated_requests += 1
        self.requests += 1

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    @property
    def is_estimated(self) -> bool:
        return self.estimated_requests > 0
