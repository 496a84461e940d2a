"""
Fixed-response model client

Answers generation prompts with a canned passage and evaluation prompts with a
canned verdict. Used as the test double and by the CLI's --offline mode.
"""

import time

from yomitore.domain.value_objects import ModelResponse
from yomitore.errors import TransportFailure
from yomitore.infrastructure.model_clients.base import ModelClient
from yomitore.prompt_builder import EVALUATION_HEADER

DEFAULT_PASSAGE = (
    "Honeybees communicate the location of food through a movement known as the "
    "waggle dance. A forager returning to the hive runs a short straight line while "
    "shaking its body, then loops back and repeats. The angle of the straight run "
    "relative to vertical matches the angle between the sun and the food source, and "
    "the length of the run tells other bees how far away the flowers are. Because the "
    "sun moves during the day, dancers adjust the angle over time. Researchers have "
    "shown that bees following a dance fly in the indicated direction, which makes "
    "the dance one of the few known symbolic languages among animals."
)

DEFAULT_VERDICT = "\n".join([
    "Appropriate: Yes",
    "Importance: 4",
    "Conciseness: 4",
    "Accuracy: 5",
    "Improvement 1: Mention that the dance encodes distance as well as direction.",
    "Improvement 2: Keep the wording closer to the passage's main claim.",
    "Improvement 3: Drop minor details about the loop back.",
    "Overall: PASS",
    "",
    "The summary captures the main point of the passage.",
])


class FixedResponseClient(ModelClient):
    """Model client that never touches the network"""

    def __init__(
        self,
        passage: str = DEFAULT_PASSAGE,
        verdict: str = DEFAULT_VERDICT,
        model_name: str = "fixed",
        delay_seconds: float = 0.0,
        failure: str | None = None,
    ):
        """
        Args:
            passage: Output for generation prompts
            verdict: Output for evaluation prompts
            model_name: Reported model name
            delay_seconds: Simulated latency per call
            failure: When set, every call raises TransportFailure with this message
        """
        self.passage = passage
        self.verdict = verdict
        self.model_name = model_name
        self.delay_seconds = delay_seconds
        self.failure = failure
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> ModelResponse:
        self.prompts.append(prompt)
        if self.delay_seconds:
            time.sleep(self.delay_seconds)
        if self.failure is not None:
            raise TransportFailure(self.failure)
        output = self.verdict if prompt.startswith(EVALUATION_HEADER) else self.passage
        return ModelResponse(
            output=output,
            latency_ms=int(self.delay_seconds * 1000),
            model_name=self.model_name,
        )
